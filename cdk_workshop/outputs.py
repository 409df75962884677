"""
Named stack outputs shared between the application stack, its pipeline stage
and the post-deploy smoke tests.

An output is published once by the stack that declares it (as a CfnOutput,
whose value is a deploy-time token) and can then be re-exported by enclosing
constructs without being copied. Consumers look outputs up by name through
the ExposesOutputs interface only, so they never depend on the concrete stack
type that declared them.

CfnOutput documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk/CfnOutput.html
"""

from typing import Dict, Iterable, Protocol, Tuple

from aws_cdk import CfnOutput


class DuplicateOutputError(ValueError):
    """Raised when two outputs with the same name are published in one scope."""

    def __init__(self, name: str, scope_name: str) -> None:
        super().__init__(f"Output '{name}' is already published by '{scope_name}'")
        self.name = name
        self.scope_name = scope_name


class UnknownOutputError(KeyError):
    """Raised when an output name is not exposed by the scope it is looked up in."""

    def __init__(self, name: str, scope_name: str, available: Iterable[str]) -> None:
        self.name = name
        self.scope_name = scope_name
        self.available = tuple(available)
        super().__init__(name)

    def __str__(self) -> str:
        available = ", ".join(self.available) or "none"
        return (
            f"Output '{self.name}' is not exposed by '{self.scope_name}' "
            f"(available: {available})"
        )


class ExposesOutputs(Protocol):
    """Anything that publishes named stack outputs: a stack or a stage."""

    @property
    def output_names(self) -> Tuple[str, ...]:
        ...

    def output(self, name: str) -> CfnOutput:
        ...


class OutputRegistry:
    """
    Ordered name -> CfnOutput mapping owned by one scope.

    Entries are added once during construction and never replaced.
    """

    def __init__(self, scope_name: str) -> None:
        self.scope_name = scope_name
        self._handles: Dict[str, CfnOutput] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._handles

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._handles)

    def check_available(self, name: str) -> None:
        if name in self._handles:
            raise DuplicateOutputError(name, self.scope_name)

    def add(self, name: str, handle: CfnOutput) -> CfnOutput:
        self.check_available(name)
        self._handles[name] = handle
        return handle

    def get(self, name: str) -> CfnOutput:
        try:
            return self._handles[name]
        except KeyError:
            raise UnknownOutputError(name, self.scope_name, self.names) from None

    def reexport(self, source: ExposesOutputs, names: Iterable[str]) -> None:
        """Alias the named outputs of source under the same names."""
        for name in names:
            self.add(name, source.output(name))
