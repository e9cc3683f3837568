"""
Message Bus

Routes lifecycle commands to their single handler and committed domain
events to any number of subscribers. Apps wire themselves in from their
``AppConfig.ready()`` through a module level ``register(bus)``.
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Type
import logging

from shared.domain.base import DomainEvent
from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)

CommandHandler = Callable[[Any], Any]
EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """
    Commands: exactly one handler each; the caller gets its result or error
    Events: fan out to every subscriber; a failing subscriber is logged
    """

    def __init__(self):
        self._command_handlers: Dict[Type, CommandHandler] = {}
        self._subscribers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    # ===== Registration =====

    def register_command_handler(self, command_type: Type, handler: CommandHandler):
        if command_type in self._command_handlers:
            raise ValueError(f"{command_type.__name__} already has a handler")
        self._command_handlers[command_type] = handler
        logger.debug(f"Command {command_type.__name__} -> {getattr(handler, '__qualname__', handler)}")

    def register_command_handlers(self, handlers: Mapping[Type, Any]):
        """
        Register ``{CommandType: handler_instance}`` pairs

        Handler instances expose ``handle(command)``. Types that are
        already wired are skipped, so app registries may be loaded twice.
        """
        for command_type, handler in handlers.items():
            if not self.has_command_handler(command_type):
                self.register_command_handler(command_type, handler.handle)

    def has_command_handler(self, command_type: Type) -> bool:
        return command_type in self._command_handlers

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        subscribers = self._subscribers.setdefault(event_type, [])
        if handler not in subscribers:
            subscribers.append(handler)

    def register_event_handlers(self, handlers: Mapping[Type[DomainEvent], EventHandler]):
        for event_type, handler in handlers.items():
            self.register_event_handler(event_type, handler)

    # ===== Dispatch =====

    def handle_command(self, command: Any) -> Any:
        """
        Run the handler for ``command`` and return its result

        Domain errors are expected outcomes (refusals) and are re-raised
        after an info line; anything else is logged as an error first.
        """
        name = type(command).__name__
        handler = self._command_handlers.get(type(command))
        if handler is None:
            raise ValueError(f"No handler registered for command {name}")

        logger.info(f"Handling command: {name}")
        try:
            return handler(command)
        except DomainError as e:
            logger.info(f"Command {name} refused: {e.code}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Command {name} failed: {e}")
            raise

    def publish_events(self, events: Iterable[DomainEvent]):
        """Deliver each event to its subscribers; subscriber errors never propagate."""
        for event in events:
            event_type = type(event)
            subscribers = self._subscribers.get(event_type)
            if not subscribers:
                logger.warning(f"No subscribers for event {event_type.__name__}")
                continue

            logger.info(f"Publishing {event_type.__name__} (aggregate {event.aggregate_id}, id {event.event_id})")
            for subscriber in subscribers:
                try:
                    subscriber(event)
                except Exception as e:
                    logger.error(
                        f"Subscriber {getattr(subscriber, '__name__', subscriber)} "
                        f"failed on {event_type.__name__}: {e}",
                        exc_info=True,
                    )


message_bus = MessageBus()
