"""
commandtools execution results.

ExecutionResult is the structured outcome of running a command body. It is
built through ExecutionResult.Builder, a two-state (building / built) object:
setters and build() work while building, and any use after build() raises
InvalidStateError.

    >>> result = ExecutionResult.Builder().set_success(True).build()
    >>> result.success
    True
"""
from .faults import InvalidStateError, FaultCode
from .utils import view


class ExecutionResult:
    """
    immutable outcome of one command execution.
    """
    __slots__ = ("_success",)

    success = view("success")

    def __init__(self, success=True, /):
        if not isinstance(success, bool):
            raise TypeError("execution result 'success' must be a boolean")
        self._success = success

    def __bool__(self):
        return self._success

    def __eq__(self, other, /):
        if not isinstance(other, ExecutionResult):
            return NotImplemented
        return self._success == other._success

    def __hash__(self):
        return hash((ExecutionResult, self._success))

    def __repr__(self):
        return f"execution-result(success={self._success!r})"

    class Builder:
        """
        single-use builder for ExecutionResult.

        - starts as successful; set_success() changes that and returns the builder.
        - build() may be called exactly once; afterwards every call raises
          InvalidStateError.
        """
        __slots__ = ("_success", "_built")

        def __init__(self):
            self._success = True
            self._built = False

        @property
        def built(self):
            return self._built

        def _assure_building(self, operation):
            if self._built:
                raise InvalidStateError(
                    "cannot %s: this result builder was already used" % operation,
                    title="invalid state",
                    code=FaultCode.INVALID_STATE,
                    hint="create a new ExecutionResult.Builder for every result",
                    operation=operation,
                )

        def set_success(self, success, /):
            self._assure_building("set success")
            if not isinstance(success, bool):
                raise TypeError("execution result 'success' must be a boolean")
            self._success = success
            return self

        def build(self):
            self._assure_building("build")
            self._built = True
            return ExecutionResult(self._success)


__all__ = (
    "ExecutionResult",
)
