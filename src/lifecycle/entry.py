"""
entry.py - Program entry point
------------------------------

Responsible for:
- building the components through the caller's factory
- handing the program to the caller's wiring function
- installing termination-signal listeners once startup succeeded
- terminating the process on any unrecovered failure
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, NoReturn, Optional, Union

from lifecycle.config_manager import load_settings
from lifecycle.models.enums import ExitCode, LogCategory
from lifecycle.models.settings import LifecycleSettings
from lifecycle.program import Program
from lifecycle.utils import configure_logger, get_category_logger
from lifecycle.utils.aio import maybe_await

log = get_category_logger(LogCategory.SYSTEM)

ComponentFactory = Callable[[], Union[Awaitable[Any], Any]]
WiringFunction = Callable[[Program], Union[Awaitable[Any], Any]]


@dataclass
class ProgramConfig:
    """
    Everything run() needs.

    Attributes:
        main: Wires components together and must call program.start_components()
        init_components: Returns the components (mapping or dataclass), sync or async
        settings: Explicit settings; when None they are loaded from config_path / $LIFECYCLE_CONFIG
        config_path: Optional YAML file with lifecycle settings
    """
    main: WiringFunction
    init_components: ComponentFactory
    settings: Optional[LifecycleSettings] = None
    config_path: Union[str, Path, None] = None

    def resolve_settings(self) -> LifecycleSettings:
        if self.settings is not None:
            return self.settings
        return load_settings(self.config_path)


async def start_program(config: ProgramConfig) -> Program:
    """
    Build, wire and start a program.

    Returns once the components started and signal listeners are installed
    (or once wiring finished without starting anything, which is logged).
    On failure, whatever was started is stopped and the original error is
    re-raised.
    """
    settings = config.resolve_settings()
    configure_logger(settings.level, settings.use_colors)

    log.info("Initializing components")
    components = await maybe_await(config.init_components())
    program = Program(components, settings)

    try:
        log.info("Wiring app")
        await maybe_await(config.main(program))

        if not program.start_requested:
            log.warn("start_components was not called inside the main function")
        else:
            await program.start_task
            program.listen_for_signals()
    except Exception as e:
        await _settle_start(program, e)
        try:
            await program.stop(reason="startup failure")
        except Exception as err:
            log.error(
                "Error stopping components after startup failure",
                error=str(err),
                error_type=type(err).__name__,
            )
        raise

    return program


async def _settle_start(program: Program, error: BaseException) -> None:
    """Let a start that wiring left in flight finish before anything is stopped."""
    if program.start_task is None:
        return
    result, = await asyncio.gather(program.start_task, return_exceptions=True)
    if isinstance(result, BaseException) and result is not error:
        log.error(
            "Error starting components after wiring failure",
            error=str(result),
            error_type=type(result).__name__,
        )


async def serve(config: ProgramConfig) -> ExitCode:
    """Run a program until it is stopped and map the outcome to an exit code."""
    try:
        program = await start_program(config)
    except Exception as e:
        log.error(f"Fatal error: {e}", error_type=type(e).__name__, exc_info=e)
        return ExitCode.FAILURE

    log.info("🏁 Application initialized. Waiting for exit signal...")
    try:
        await program.wait_stopped()
    except Exception as e:
        log.error(f"Shutdown failed: {e}", error_type=type(e).__name__, exc_info=e)
        return ExitCode.SHUTDOWN_FAILURE

    log.info("👋 Program shut down cleanly.")
    return ExitCode.OK


def run(config: ProgramConfig) -> NoReturn:
    """
    Program entry point, this should be the one and only top level
    expression of your program. Never returns: exits the process.
    """
    try:
        code = asyncio.run(serve(config))
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
        code = ExitCode.INTERRUPTED
    sys.exit(int(code))
