from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable, MutableMapping, Optional, Union

from layered_dotenv.config import (
    DEFAULT_PROFILE_PREFIX,
    DEFAULT_PROFILES_VAR,
    LoaderSettings,
    load_settings,
)
from layered_dotenv.log import DotenvLogger, StreamLogger
from layered_dotenv.store import EnvStore, parse_profiles
from layered_dotenv.tokenizer import parse
from layered_dotenv.validation import ValidationError, validate

PathLike = Union[str, Path]
ReadText = Callable[[PathLike], str]


class FileReadError(RuntimeError):
    def __init__(self, path: PathLike, cause: BaseException):
        super().__init__(f"Failed to load environment variables from {path}: {cause}")
        self.path = str(path)
        self.cause = cause


def read_env_file(path: PathLike) -> str:
    return Path(path).read_text(encoding="utf-8")


class Dotenv:
    """Loads env files into a shared store and validates the result.

    Files are applied strictly in the order they are loaded, so a key holds
    the value from the last file that defined it. Explicit paths always load
    before the profile files named by the PROFILES entry of the store.

    Example:
        settings = Dotenv.load_config(AppSettings, [".env", ".env.local"])
    """

    def __init__(
        self,
        *,
        logger: Optional[DotenvLogger] = None,
        coerce_values: bool = False,
        store: Union[EnvStore, MutableMapping[str, str], None] = None,
        profile_prefix: str = DEFAULT_PROFILE_PREFIX,
        profiles_var: str = DEFAULT_PROFILES_VAR,
        read_text: Optional[ReadText] = None,
    ):
        self.logger: DotenvLogger = logger or StreamLogger()
        self.coerce_values = coerce_values
        self.store = store if isinstance(store, EnvStore) else EnvStore(store)
        self.profile_prefix = profile_prefix
        self.profiles_var = profiles_var
        self._read_text = read_text or read_env_file

    @classmethod
    def from_settings(
        cls, settings: Optional[LoaderSettings] = None, **options: Any
    ) -> "Dotenv":
        """Build a loader whose defaults come from DOTENV_* variables."""
        settings = settings or load_settings()
        options.setdefault("coerce_values", settings.coerce_values)
        options.setdefault("profile_prefix", settings.profile_prefix)
        options.setdefault("profiles_var", settings.profiles_var)
        return cls(**options)

    @property
    def values(self) -> dict[str, Any]:
        return self.store.typed

    def load(self, path: PathLike) -> dict[str, Any]:
        """Read, parse and apply one file. Returns what that file defined."""
        self.logger.info(f"Loading environment variables from {path}")
        try:
            content = self._read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            err = FileReadError(path, exc)
            self.logger.error(str(err), cause=exc, env=self.store.snapshot())
            raise err from exc

        parsed = parse(content, coerce=self.coerce_values)
        self.store.update(parsed)
        return parsed

    def profiles(self) -> list[str]:
        return parse_profiles(self.store.get(self.profiles_var))

    def profile_path(self, profile: str) -> str:
        return f"{self.profile_prefix}.{profile}"

    def initialize(
        self, filepaths: Iterable[PathLike] = (), schema: Any = None
    ) -> Any:
        """Load explicit paths, then profiles; validate when a schema is given."""
        for path in filepaths:
            self.load(path)

        profiles = self.profiles()
        if profiles:
            self.logger.info(
                f"Loading profiles: {self.profiles_var}={','.join(profiles)}"
            )
            for profile in profiles:
                self.load(self.profile_path(profile))

        if schema is not None:
            self.logger.info("Validating environment variables")
            return self.get(schema)
        return None

    def get(self, schema: Any) -> Any:
        """Validate the loaded configuration against schema.

        With coercion on, the typed values of this session are validated;
        otherwise the whole store is, as strings.
        """
        data = self.store.typed if self.coerce_values else self.store.snapshot()
        try:
            return validate(schema, data)
        except ValidationError as exc:
            self.logger.error(str(exc), cause=exc.cause, env=data)
            raise

    @classmethod
    def configure(
        cls, filepaths: Iterable[PathLike] = (), schema: Any = None, **options: Any
    ) -> "Dotenv":
        dotenv = cls(**options)
        dotenv.initialize(filepaths, schema)
        return dotenv

    @classmethod
    def load_config(
        cls, schema: Any, filepaths: Iterable[PathLike] = (), **options: Any
    ) -> Any:
        """Load files and profiles, then return the validated configuration."""
        return cls(**options).initialize(filepaths, schema)


def load_dotenv(
    paths: Iterable[PathLike] = (".env",),
    *,
    coerce_values: bool = False,
    store: Union[EnvStore, MutableMapping[str, str], None] = None,
    logger: Optional[DotenvLogger] = None,
) -> dict[str, Any]:
    """Load env files (and any selected profiles) into the environment.

    Later files replace values set by earlier ones. Returns the values
    written during this call.
    """
    dotenv = Dotenv.configure(
        paths, coerce_values=coerce_values, store=store, logger=logger
    )
    return dotenv.values
