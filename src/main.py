import logging
import signal
import sys
import time

from app_config import AppConfigurationError, load_app_config, log_level, resolve_config_path
from notifications import NotificationConfigurationError
from pomodoro import PomodoroError
from runtime import create_runtime
from server import ServerConfigurationError, UIServer, UIServerConfig
from store import StoreConfigurationError


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("pomodorio")


def main() -> int:
    """Run the pomodoro backend until interrupted."""
    logger = setup_logging(level=logging.INFO)

    try:
        config_path = resolve_config_path()
        app_config = load_app_config()
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    logging.getLogger().setLevel(log_level(app_config.logging))
    if app_config.source_file:
        logger.info("Loaded runtime config: %s", config_path)
    else:
        logger.info("No config file at %s, using defaults", config_path)

    try:
        runtime = create_runtime(app_config, logger=logger)
    except (StoreConfigurationError, NotificationConfigurationError) as error:
        logger.error("Configuration error: %s", error)
        return 1
    except PomodoroError as error:
        logger.error("Store initialization failed: %s", error)
        return 1

    try:
        ui_server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        return 1

    if not ui_server_config.enabled:
        logger.info("UI server disabled via ui_server.enabled=false; nothing to serve")
        return 0

    ui_server = UIServer(
        config=ui_server_config,
        command_handler=runtime.dispatcher.handle_message,
        logger=logging.getLogger("ui_server"),
    )
    runtime.publisher.attach(ui_server)

    try:
        logger.info("Starting UI server...")
        ui_server.start(timeout_seconds=5.0)
        runtime.machine.restore_state()
        logger.info("Press Ctrl+C to stop.")

        shutdown = False

        def handle_signal(signum, frame) -> None:
            del frame
            nonlocal shutdown
            logger.info("Signal %s received, stopping.", signal.Signals(signum).name)
            shutdown = True

        signal.signal(signal.SIGINT, handle_signal)
        signal.signal(signal.SIGTERM, handle_signal)

        while not shutdown:
            time.sleep(0.2)

    except KeyboardInterrupt:
        logger.info("Stopping by user request.")
    except PomodoroError as error:
        logger.error("Initial state broadcast failed: %s", error)
        return 1
    except Exception as error:
        logger.error("Unexpected error: %s", error, exc_info=True)
        return 1
    finally:
        logger.info("Stopping UI server...")
        try:
            ui_server.stop(timeout_seconds=5.0)
        except Exception as error:
            logger.error("Error stopping UI server: %s", error, exc_info=True)

    return 0


if __name__ == "__main__":
    sys.exit(main())
