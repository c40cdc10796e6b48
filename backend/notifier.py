"""
Periodic notification of the current codes.

Every `interval` seconds (30 by default, matching the TOTP step) the
scheduler loads the stored accounts, generates their codes and hands one
notification to a sink: title "Authentication codes", body with one
"name: code" line per account. Accounts whose secret fails are logged and
left out; if no account produced a code, nothing is sent.

The default sink only logs the message.
"""
import logging
import threading
from typing import Callable, Iterable, Optional

from core import NOTIFICATION_TITLE, Account, format_notification, generate_codes, now

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30


def log_sink(title: str, message: str) -> None:
    logger.info("%s\n%s", title, message)


class NotificationScheduler:
    def __init__(
        self,
        load_accounts: Callable[[], Iterable[Account]],
        sink: Callable[[str, str], None] = log_sink,
        interval: int = DEFAULT_INTERVAL,
        time_step: int = 30,
        provider=None,
        clock: Callable[[], int] = now,
        is_enabled: Optional[Callable[[], bool]] = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.load_accounts = load_accounts
        self.sink = sink
        self.interval = interval
        self.time_step = time_step
        self.provider = provider
        self.clock = clock
        # Re-read on every run, so a flag flipped by another process is honored
        self.is_enabled = is_enabled
        self._stop: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def send_notification(self, timestamp: int = None) -> Optional[str]:
        """Build and emit one notification; returns the message or None."""
        if self.is_enabled is not None and not self.is_enabled():
            logger.debug("Notifications disabled, skipping")
            return None

        accounts = list(self.load_accounts())
        if not accounts:
            logger.debug("No accounts, skipping notification")
            return None

        timestamp = self.clock() if timestamp is None else timestamp
        results = generate_codes(accounts, timestamp, self.time_step, self.provider)
        for r in results:
            if not r.ok:
                logger.error("Code generation failed for '%s': %s", r.name, r.error)

        message = format_notification(results)
        if not message:
            return None
        self.sink(NOTIFICATION_TITLE, message)
        return message

    def _run(self, stop_event: threading.Event):
        logger.info("Notification scheduler started (every %ss)", self.interval)
        while not stop_event.wait(self.interval):
            try:
                self.send_notification()
            except Exception:
                # A broken store or sink must not kill the timer thread
                logger.exception("Notification run failed")
        logger.info("Notification scheduler stopped")

    def start(self) -> bool:
        """
        Start the background thread; False if a thread is still alive,
        including one that was asked to stop but has not finished yet.
        """
        with self._lock:
            if self.running:
                return False
            self._stop = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop,), name="authnotify-scheduler", daemon=True
            )
            self._thread.start()
            return True

    def stop(self, timeout: float = 5.0) -> bool:
        """
        Signal the background thread and wait up to `timeout` seconds.

        Returns True once the thread has exited. False if it was not running,
        or if it is still finishing a run; it exits on its own afterwards and
        `running` stays True until then.
        """
        with self._lock:
            if not self.running:
                return False
            self._stop.set()
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Notification scheduler still finishing a run")
                return False
            self._thread = None
            return True

    def run_forever(self):
        """Foreground loop (CLI `notify`); returns when stop() is called."""
        self._stop = threading.Event()
        self._run(self._stop)
