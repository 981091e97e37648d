"""
Bosun termination signals and lifecycle outcomes.

- SUCCESS / ERROR: the two well-known exit codes (any other int is allowed
  through abort()/exit()).
- Outcome: tagged, immutable result of one command lifecycle, either
  Continue (the lifecycle ran to its end, carrying a boolean result) or
  Terminate (abort()/exit() stopped it, carrying a code and a message).
  Nested lifecycles hand their Outcome back to the caller, which re-signals a
  Terminate so it reaches the dispatcher.
- Stop: the exception abort()/exit() raise to leave execute() at any depth.
  It is caught by the run() of the same command and turned into an Outcome;
  it never crosses a run() boundary.
"""
from typing import final

SUCCESS = 0
"""Clean exit: the command completed without error."""

ERROR = 1
"""The command failed or was aborted."""


@final
class Outcome:
    """
    Result of Command.run().

    Construct with Outcome.proceed(result) or Outcome.terminate(code, message).

    Properties
    - terminated: True for Terminate.
    - code: exit code (SUCCESS/ERROR for Continue, as given for Terminate).
    - message: termination message (None for Continue).
    - result: the lifecycle's boolean result (Continue), or code == SUCCESS.
    - success: same as result; also bool(outcome).
    - reported: the message was already written to the error sink, so the
      dispatcher does not write it again. Not part of equality.
    """
    __slots__ = ("_terminated", "_code", "_message", "_reported")

    def __init__(self, terminated, code, message=None, reported=False):
        if not isinstance(code, int) or isinstance(code, bool):
            raise TypeError("outcome code must be an integer")
        object.__setattr__(self, "_terminated", bool(terminated))
        object.__setattr__(self, "_code", code)
        object.__setattr__(self, "_message", message)
        object.__setattr__(self, "_reported", bool(reported))

    @classmethod
    def proceed(cls, result=True):
        return cls(False, SUCCESS if result else ERROR)

    @classmethod
    def terminate(cls, code=ERROR, message=None, reported=False):
        return cls(True, code, message, reported)

    def __setattr__(self, name, value, /):
        raise AttributeError("outcome is read-only")

    @property
    def terminated(self):
        return self._terminated

    @property
    def code(self):
        return self._code

    @property
    def message(self):
        return self._message

    @property
    def reported(self):
        return self._reported

    @property
    def result(self):
        return self._code == SUCCESS

    success = result

    def __bool__(self):
        return self._code == SUCCESS

    def __eq__(self, other):
        if not isinstance(other, Outcome):
            return NotImplemented
        return (self._terminated, self._code, self._message) == (other._terminated, other._code, other._message)

    def __hash__(self):
        return hash((self._terminated, self._code, self._message))

    def __repr__(self):
        if self._terminated:
            return "terminate(code=%r, message=%r)" % (self._code, self._message)
        return "continue(result=%r)" % self.result


class Stop(BaseException):
    """
    Unwinds execute() back to the owning run().

    A BaseException: "except Exception" blocks in command code let it pass.
    """

    def __init__(self, outcome):
        super().__init__(outcome.message)
        self.outcome = outcome


__all__ = (
    "SUCCESS",
    "ERROR",
    "Outcome",
    "Stop",
)
