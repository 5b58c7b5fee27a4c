"""Removal options.

Defines the validated configuration bag passed to both entry points:
glob behaviour, retry tunables and the filesystem capability sets.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rimraf.core.capabilities import AsyncFileSystem, FileSystem

# Keys that may be set from a config file (capability sets cannot)
CONFIG_KEYS = frozenset({"glob", "max_retries", "emfile_wait", "time_unit", "concurrency_limit"})


class GlobOptions(BaseModel):
    """Options forwarded to pattern expansion.

    Expansion never sorts its results and never fails on zero matches.

    Attributes:
        recursive: Let ``**`` match any number of directories.
        include_hidden: Let wildcards match names starting with a dot.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    recursive: bool = False
    include_hidden: bool = False


class RimrafOptions(BaseModel):
    """Configuration for a single removal call.

    Attributes:
        glob: Pattern expansion options. None disables expansion, so every
            argument is treated as a literal path.
        max_retries: Retries allowed per top-level target for BUSY,
            NOT_EMPTY and PERMISSION_DENIED outcomes.
        emfile_wait: Budget for the shared TOO_MANY_OPEN_FILES backoff
            counter, in time units.
        time_unit: Length of one backoff time unit, in seconds.
        concurrency_limit: Maximum number of primitive calls in flight for
            the concurrent strategy. None means no cap.
        fs: Blocking filesystem primitives.
        afs: Non-blocking filesystem primitives.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    glob: Annotated[
        GlobOptions | None,
        Field(description="Pattern expansion options (None = literal paths only)"),
    ] = GlobOptions()
    max_retries: Annotated[
        int,
        Field(ge=0, description="Busy retries per top-level target"),
    ] = 3
    emfile_wait: Annotated[
        int,
        Field(ge=0, description="Shared EMFILE backoff budget in time units"),
    ] = 1000
    time_unit: Annotated[
        float,
        Field(ge=0, description="Seconds per backoff time unit"),
    ] = 0.001
    concurrency_limit: Annotated[
        int | None,
        Field(ge=1, description="Cap on in-flight primitive calls (None = no cap)"),
    ] = None
    fs: FileSystem = Field(default_factory=FileSystem)
    afs: AsyncFileSystem = Field(default_factory=AsyncFileSystem)

    @field_validator("glob", mode="before")
    @classmethod
    def coerce_glob_flag(cls, v: object) -> object:
        """Accept a plain boolean for the glob option."""
        if v is True:
            return GlobOptions()
        if v is False:
            return None
        return v
