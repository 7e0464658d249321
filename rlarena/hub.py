"""Delivery of real-time notifications to connected users."""

from __future__ import annotations

import json
import queue
import threading
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any

from rlarena import log

_BUFFER_SIZE = 256
_CLOSED = object()
_STOP = object()


@dataclass(frozen=True)
class BuildStatusMessage:
    """Payload announcing a change in a submission's build status."""

    submission_id: str
    status: str
    message: str = ""
    image_url: str = ""

    def to_dict(self) -> dict[str, str]:
        payload = {"submissionId": self.submission_id, "status": self.status}
        if self.message:
            payload["message"] = self.message
        if self.image_url:
            payload["imageUrl"] = self.image_url
        return payload


def _jsonable(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return value


@dataclass(frozen=True)
class Message:
    """A message for one user, or for everyone when ``user_id`` is empty."""

    user_id: str
    type: str
    payload: Any = None

    def to_json(self) -> str:
        """Wire form; the recipient is not part of it."""
        return json.dumps(
            {"type": self.type, "payload": _jsonable(self.payload)},
            separators=(",", ":"),
            default=str,
        )


class HubClient:
    """One user's connection, with a bounded outgoing buffer."""

    def __init__(self, user_id: str, buffer_size: int = _BUFFER_SIZE) -> None:
        self.user_id = user_id
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=buffer_size)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def deliver(self, message: Message) -> bool:
        """Buffer ``message``; False when the buffer is full or the client closed."""
        if self.closed:
            return False
        try:
            self._queue.put_nowait(message)
        except queue.Full:
            return False
        return True

    def receive(self, timeout: float | None = None) -> Message | None:
        """Next buffered message, or None on timeout or once closed and drained."""
        try:
            if self.closed:
                item = self._queue.get_nowait()
            else:
                item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        return None if item is _CLOSED else item

    def close(self) -> None:
        if self.closed:
            return
        self._closed.set()
        try:
            self._queue.put_nowait(_CLOSED)
        except queue.Full:
            pass


class Hub:
    """Keeps one client per user and routes messages to them."""

    def __init__(self, buffer_size: int = _BUFFER_SIZE) -> None:
        self._clients: dict[str, HubClient] = {}
        self._lock = threading.RLock()
        self._outbox: queue.Queue[Any] = queue.Queue(maxsize=buffer_size)

    @property
    def client_count(self) -> int:
        with self._lock:
            return len(self._clients)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._clients

    def register(self, client: HubClient) -> None:
        """Add ``client``, closing any earlier connection of the same user."""
        with self._lock:
            old = self._clients.get(client.user_id)
            if old is not None and old is not client:
                old.close()
                log.info("Replaced existing WebSocket connection", userId=client.user_id)
            self._clients[client.user_id] = client
            log.info(
                "WebSocket client registered",
                userId=client.user_id,
                totalClients=len(self._clients),
            )

    def unregister(self, client: HubClient) -> None:
        """Remove and close ``client`` if it is the user's current connection."""
        with self._lock:
            if self._clients.get(client.user_id) is not client:
                return
            del self._clients[client.user_id]
            client.close()
            log.info(
                "WebSocket client unregistered",
                userId=client.user_id,
                totalClients=len(self._clients),
            )

    def _dispatch(self, message: Message) -> None:
        with self._lock:
            if message.user_id:
                client = self._clients.get(message.user_id)
                targets = [client] if client is not None else []
            else:
                targets = list(self._clients.values())

        full = [client for client in targets if not client.deliver(message)]
        if message.user_id:
            for client in full:
                log.warn("Client send channel full", userId=client.user_id)
            return
        for client in full:
            log.warn("Client send channel full, unregistering", userId=client.user_id)
            self.unregister(client)

    def process_pending(self) -> int:
        """Route every queued message now; return how many were routed."""
        routed = 0
        while True:
            try:
                item = self._outbox.get_nowait()
            except queue.Empty:
                return routed
            if item is _STOP:
                continue
            self._dispatch(item)
            routed += 1

    def run(self) -> None:
        """Route queued messages until :meth:`stop` is called."""
        while True:
            item = self._outbox.get()
            if item is _STOP:
                return
            self._dispatch(item)

    def stop(self) -> None:
        self._outbox.put(_STOP)

    def send_to_user(self, user_id: str, msg_type: str, payload: Any) -> None:
        self._outbox.put(Message(user_id=user_id, type=msg_type, payload=payload))

    def broadcast(self, msg_type: str, payload: Any) -> None:
        self._outbox.put(Message(user_id="", type=msg_type, payload=payload))

    def send_build_status(
        self, user_id: str, submission_id: str, status: str, message: str, image_url: str
    ) -> None:
        self.send_to_user(
            user_id,
            "build_status",
            BuildStatusMessage(
                submission_id=submission_id,
                status=status,
                message=message,
                image_url=image_url,
            ),
        )