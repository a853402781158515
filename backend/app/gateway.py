class EventGateway:
    """Outbound half of the transport: deliver an event to one connection."""

    def emit(self, sid: str, event: str, payload=None) -> None:
        raise NotImplementedError

    def is_connected(self, sid: str) -> bool:
        raise NotImplementedError


class SocketIOGateway(EventGateway):
    def __init__(self, sio, namespace: str = '/ws'):
        self._sio = sio
        self.namespace = namespace

    def emit(self, sid: str, event: str, payload=None) -> None:
        # socketio.emit works outside a request context, so background
        # timer and bot tasks can use it too
        self._sio.emit(event, payload if payload is not None else {}, to=sid, namespace=self.namespace)

    def is_connected(self, sid: str) -> bool:
        return self._sio.server.manager.is_connected(sid, self.namespace)
