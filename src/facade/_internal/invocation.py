from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from facade._internal.keys import MethodKey
from facade._internal.signatures import CallableSignatureMatcher
from facade.exceptions import FacadeMethodInvocationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MethodRegistration:
    """Bind a registered callable to the receiver it is invoked on.

    ``receiver`` is passed as the first argument of unbound functions such as
    ``Counter.increment``. It is ``None`` for plain functions, static methods
    and bound methods, which already carry their receiver.
    """

    method_key: MethodKey
    method: Callable[..., Any]
    receiver: Any = None
    signature_matcher: CallableSignatureMatcher = field(
        default_factory=CallableSignatureMatcher,
        compare=False,
        repr=False,
    )

    def invoke(self, /, *args: Any, **kwargs: Any) -> Any:
        """Invoke the callable and return its result.

        Arguments are matched against the callable's signature and annotated
        parameter types before the call.

        Raises:
            FacadeMethodInvocationError: If the arguments do not fit the
                callable or the callable raises.

        """
        call_args = args if self.receiver is None else (self.receiver, *args)
        try:
            self.signature_matcher.match(self.method, call_args, kwargs)
            return self.method(*call_args, **kwargs)
        except Exception as error:
            logger.debug("Method mapped to %r failed", self.method_key, exc_info=True)
            msg = f"The method mapped to {self.method_key!r} failed to execute."
            raise FacadeMethodInvocationError(msg) from error
