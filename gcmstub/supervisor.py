"""Process lifecycle: run the listener and the signal watcher, stop on the first to finish.

Each worker is a coroutine function that eventually produces one terminal
error, either by returning it or by raising it. Whichever worker reports
first is treated as fatal; the others are cancelled. In-flight requests are
not drained.
"""

import asyncio
import contextlib
import enum
import signal

import uvicorn


class State(enum.Enum):
    STARTING = "starting"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class TerminationSignal(Exception):
    def __init__(self, signum):
        self.signum = signal.Signals(signum)
        super().__init__(f"received {self.signum.name}")


class ListenerFault(Exception):
    pass


async def interrupt(signals=(signal.SIGINT, signal.SIGTERM)) -> TerminationSignal:
    """Wait for one of `signals` and return it as a TerminationSignal."""
    loop = asyncio.get_running_loop()
    received = loop.create_future()

    def on_signal(signum):
        if not received.done():
            received.set_result(signum)

    for signum in signals:
        loop.add_signal_handler(signum, on_signal, signum)
    try:
        signum = await received
    finally:
        for s in signals:
            loop.remove_signal_handler(s)
    return TerminationSignal(signum)


class Listener(uvicorn.Server):
    """uvicorn server that leaves SIGINT/SIGTERM to the supervisor."""

    # uvicorn < 0.29
    def install_signal_handlers(self):
        pass

    # uvicorn >= 0.29
    @contextlib.contextmanager
    def capture_signals(self):
        yield


async def listen(app, bind: str, port: int, logger, **options) -> ListenerFault:
    """Serve `app` until the listener stops and return why it stopped."""
    config = uvicorn.Config(app, host=bind, port=port, log_config=None, lifespan="off", **options)
    server = Listener(config)
    addr = f"{bind}:{port}"
    logger.info("listen", addr=addr)
    try:
        await server.serve()
    except SystemExit as exc:
        # uvicorn calls sys.exit() when it cannot bind
        fault = ListenerFault(f"cannot listen on {addr} (exit status {exc.code})")
        fault.__cause__ = exc
        return fault
    except OSError as exc:
        fault = ListenerFault(f"listener on {addr} failed: {exc}")
        fault.__cause__ = exc
        return fault
    return ListenerFault(f"listener on {addr} stopped")


class Supervisor:
    def __init__(self, logger, *workers):
        self.logger = logger
        self.workers = workers
        self.state = State.STARTING

    async def _report(self, worker, done: asyncio.Queue):
        try:
            result = await worker()
        except Exception as exc:
            result = exc
        done.put_nowait(result)

    async def run(self) -> Exception:
        """Start every worker, wait for the first terminal error and return it."""
        done = asyncio.Queue()
        tasks = [asyncio.create_task(self._report(worker, done)) for worker in self.workers]
        self.state = State.RUNNING
        try:
            err = await done.get()
            self.state = State.SHUTTING_DOWN
            self.logger.critical("fatal", err=str(err), kind=type(err).__name__)
        finally:
            self.state = State.SHUTTING_DOWN
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        self.state = State.STOPPED
        return err
