TICK_SEC = 1.0


class ScheduledTask:
    """Handle returned by ``call_later``; ``cancel`` stops the callback from running."""

    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class BackgroundScheduler:
    """Run callbacks after a delay on Socket.IO background tasks.

    Works under whichever async mode Flask-SocketIO picked (threading,
    eventlet or gevent). The worker sleeps in ``TICK_SEC`` slices and exits
    within one slice of being cancelled. Callbacks still receive the session
    epoch captured at scheduling time, since a cancel can race a worker that
    has already woken up.
    """

    def __init__(self, sio, tick=TICK_SEC):
        self._sio = sio
        self._tick = tick

    def call_later(self, delay: float, callback, *args) -> ScheduledTask:
        task = ScheduledTask()

        def _worker():
            remaining = delay
            while remaining > 0 and not task.cancelled:
                step = min(remaining, self._tick)
                self._sio.sleep(step)
                remaining -= step
            if task.cancelled:
                return
            callback(*args)

        self._sio.start_background_task(_worker)
        return task
