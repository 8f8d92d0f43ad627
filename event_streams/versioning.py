import abc
from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True)
class NoCondition:
    pass


@dataclass(frozen=True)
class StreamMustNotExist:
    pass


@dataclass(frozen=True)
class VersionMustEqual:
    version: int


Condition: TypeAlias = NoCondition | StreamMustNotExist | VersionMustEqual


class ExpectedVersion(abc.ABC):
    @property
    @abc.abstractmethod
    def condition(self) -> Condition:
        pass


class AnyVersion(ExpectedVersion):
    @property
    def condition(self) -> Condition:
        return NoCondition()

    def __repr__(self) -> str:
        return "ANY"


class NoStream(ExpectedVersion):
    @property
    def condition(self) -> Condition:
        return StreamMustNotExist()

    def __repr__(self) -> str:
        return "NO_STREAM"


@dataclass(frozen=True)
class ExactVersion(ExpectedVersion):
    version: int

    def __post_init__(self) -> None:
        if self.version < 0:
            raise ValueError(f"Expected version must not be negative: {self.version}")

    @property
    def condition(self) -> Condition:
        if self.version == 0:
            return StreamMustNotExist()
        return VersionMustEqual(self.version)


ANY = AnyVersion()
NO_STREAM = NoStream()


def expected(version: ExpectedVersion | int | None) -> ExpectedVersion:
    """Normalizes what callers pass as `expected_version`.

    `None` means the stream must not exist yet, an integer asks for that exact
    version. Version 0 is the implicit version of a stream nobody wrote to.
    """
    if version is None:
        return NO_STREAM
    if isinstance(version, ExpectedVersion):
        return version
    if isinstance(version, bool) or not isinstance(version, int):
        raise TypeError(f"Unsupported expected version: {version!r}")
    return ExactVersion(version)
