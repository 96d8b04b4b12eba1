import logging
import sys
import time
import traceback

# Import modules
try:
    from quoteboard.config import TICK_INTERVAL, C_RESET
    from quoteboard.logger import get_logger
    from quoteboard.state import AppState
    from quoteboard.input import handle_event
    from quoteboard.terminal import Terminal
    from quoteboard.ui import render
except ImportError as e:
    print(f"Error loading modules: {e}")
    print("Install the package first: pip install -e .")
    sys.exit(1)

log = logging.getLogger("quoteboard.main")


def main_loop(state, terminal, draw=render, clock=time.monotonic):
    """Draw, then wait for input until the next tick is due.

    An event that arrives is dispatched and the tick clock keeps running; only
    a quiet interval advances it, so ticks are skipped rather than queued.
    """
    last_tick = clock()
    while not state.should_exit:
        draw(state)
        timeout = max(0.0, TICK_INTERVAL - (clock() - last_tick))
        event = terminal.poll(timeout)
        if event is not None:
            handle_event(state, event)
        else:
            state.tick()
            last_tick = clock()


def main():
    """Main application loop."""
    get_logger()
    state = AppState()
    state.start()

    try:
        with Terminal() as terminal:
            main_loop(state, terminal)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        # terminal is restored by now
        log.exception("Dashboard crashed")
        sys.stdout.write(C_RESET)
        print(f"CRASH: {e}")
        traceback.print_exc()
        return 1
    finally:
        state.shutdown()
        log.info("Exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
