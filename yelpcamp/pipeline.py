"""
The request pipeline as an explicit, ordered list of named stages.

Flask runs ``before_request`` hooks in registration order, so the order in
which stages are installed is the order every request passes through them.
Each stage declares the stages it depends on; ``Pipeline.validate`` rejects a
list in which a dependency is missing or comes later, or in which a terminal
stage is not last. Validation happens once, when the app is created.

Default order:

    sanitize -> session -> security_headers -> authentication -> flash
        -> locals -> router -> not_found -> error_handler
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from flask import Flask

logger = logging.getLogger(__name__)


class PipelineOrderError(RuntimeError):
    """Raised at startup when stages are registered in an invalid order."""


@dataclass(frozen=True)
class Stage:
    name: str
    install: Callable[[Flask], None]
    requires: Tuple[str, ...] = ()
    # Must be the last stage (the error-rendering handler).
    terminal: bool = False


class Pipeline:
    def __init__(self, stages: Iterable[Stage]):
        self.stages: List[Stage] = list(stages)

    @property
    def names(self) -> List[str]:
        return [stage.name for stage in self.stages]

    def validate(self) -> None:
        seen = set()
        last_index = len(self.stages) - 1

        for index, stage in enumerate(self.stages):
            if stage.name in seen:
                raise PipelineOrderError(f'Stage {stage.name!r} is registered twice')

            for dependency in stage.requires:
                if dependency not in seen:
                    if dependency in self.names:
                        raise PipelineOrderError(
                            f'Stage {stage.name!r} must be registered after {dependency!r}'
                        )
                    raise PipelineOrderError(
                        f'Stage {stage.name!r} requires missing stage {dependency!r}'
                    )

            if stage.terminal and index != last_index:
                raise PipelineOrderError(f'Terminal stage {stage.name!r} must be registered last')

            seen.add(stage.name)

    def install(self, app: Flask) -> None:
        """Validate, then install every stage on ``app`` in order."""
        self.validate()
        for stage in self.stages:
            stage.install(app)
            logger.debug('Installed pipeline stage %s', stage.name)
        app.extensions['yelpcamp.pipeline'] = self.names


def default_stages() -> List[Stage]:
    """The stage list every application is built with."""
    from yelpcamp.context import init_flash, init_request_locals, init_session_binding
    from yelpcamp.errors import register_error_handlers, register_not_found
    from yelpcamp.headers import init_security_headers
    from yelpcamp.routes import register_routes
    from yelpcamp.sanitize import init_sanitizer
    from yelpcamp.users.security import init_authentication

    return [
        Stage('sanitize', init_sanitizer),
        Stage('session', init_session_binding, requires=('sanitize',)),
        Stage('security_headers', init_security_headers, requires=('session',)),
        Stage('authentication', init_authentication, requires=('session',)),
        Stage('flash', init_flash, requires=('session',)),
        Stage('locals', init_request_locals, requires=('authentication', 'flash')),
        Stage('router', register_routes, requires=('locals',)),
        Stage('not_found', register_not_found, requires=('router',)),
        Stage('error_handler', register_error_handlers, requires=('not_found',), terminal=True),
    ]
