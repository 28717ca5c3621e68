"""
Channels are the logging mechanism of patterin.

A channel is a named message stream. Producers call the channel with a message, any
watchers (plain callables, or other channels) receive it. A channel with no watchers
and no buffer is falsy, so producers can skip building expensive messages:

    channel = get_channel("geometry")
    if channel:
        channel(f"bevel at vertex {i}")

Channels are shared through a process wide registry, `get_channel(name)` always
returns the same object for the same name.
"""

import weakref
from collections import deque
from datetime import datetime
from typing import Callable, Dict, Optional, Union


class SimpleLogger:
    def __init__(self, name: str):
        self.name = name

    def log(self, message: str):
        print(f"[{self.name}-Info] {message}")

    def warning(self, message: str):
        print(f"[{self.name}-Warning] {message}")

    def error(self, message: str):
        print(f"[{self.name}-Error] {message}")


# Logger for failures inside the channel system itself
logger = SimpleLogger(__name__)


class Channel:
    """
    Observer pattern message stream.

    Usage:
        channel = Channel("debug", buffer_size=100, timestamp=True)
        channel.watch(print)  # Add watcher
        channel.watch(my_func, weak=True)  # Add weak reference watcher
        channel("Hello world!")  # Send message
        channel.resize_buffer(200)  # Resize buffer
    """

    def __init__(
        self,
        name: str,
        buffer_size: int = 0,
        line_end: Optional[str] = None,
        timestamp: bool = False,
    ):
        self.watchers = []
        self.name = name
        self.buffer_size = buffer_size
        self.line_end = line_end
        self.timestamp = timestamp
        self.buffer = None if buffer_size == 0 else deque(maxlen=buffer_size)
        self._call_depth = 0

    def __repr__(self):
        return f"Channel({repr(self.name)}, buffer_size={str(self.buffer_size)}, line_end={repr(self.line_end)})"

    def __call__(
        self,
        message: Union[str, bytes, bytearray],
        *args,
        indent: Optional[bool] = True,
        **kwargs,
    ):
        # A watcher writing back into its own channel must not recurse forever.
        if self._call_depth > 10:
            logger.warning(f"Channel '{self.name}' recursion limit exceeded, dropping message")
            return
        self._call_depth += 1
        try:
            if isinstance(message, (bytes, bytearray)):
                self._dispatch(message, message)
                return
            original_msg = message
            if self.line_end is not None:
                message = message + self.line_end
            if indent:
                message = "    " + message.replace("\n", "\n    ")
            if self.timestamp:
                ts = datetime.now().strftime("[%H:%M:%S] ")
                message = ts + message.replace("\n", f"\n{ts}")
            self._dispatch(message, original_msg, indent=indent)
        finally:
            self._call_depth -= 1

    def _dispatch(self, message, original_msg, indent=None):
        for w in self.watchers[:]:
            self._call_watcher(w, message, indent=indent, original_msg=original_msg)
        if self.buffer is not None:
            self.buffer.append(message)

    def __len__(self):
        return self.buffer_size

    def __iadd__(self, other):
        self.watch(other)
        return self

    def __isub__(self, other):
        self.unwatch(other)
        return self

    def __bool__(self):
        """
        The truthy value of the channel reflects whether a message will actually be sent
        anywhere, or buffered.
        """
        return bool(self.watchers) or self.buffer_size != 0

    def watch(self, monitor_function: Callable, weak: bool = False):
        """
        Add a watcher function to this channel. Buffered messages are replayed to it.

        @param monitor_function: The function to call when messages are sent
        @param weak: If True, use a weak reference to prevent memory leaks
        """
        for q in self.watchers:
            if q is monitor_function:
                return
            if isinstance(q, weakref.ref) and q() is monitor_function:
                return

        if weak:
            try:
                self.watchers.append(weakref.ref(monitor_function, self._watcher_died))
            except TypeError:
                # Built-ins and some callables do not support weak references.
                logger.warning(f"Callable {monitor_function} does not support weak references, using strong reference")
                self.watchers.append(monitor_function)
        else:
            self.watchers.append(monitor_function)

        if self.buffer is not None:
            for line in list(self.buffer):
                monitor_function(line)

    def _call_watcher(self, watcher, message, indent=None, original_msg=None):
        try:
            if isinstance(watcher, Channel):
                watcher(original_msg if original_msg is not None else message, indent=indent)
                return
            if isinstance(watcher, weakref.ref):
                watcher_func = watcher()
                if watcher_func is None:
                    self._watcher_died(watcher)
                    return
            else:
                watcher_func = watcher
            watcher_func(message)
        except Exception as e:
            # One broken watcher must not stop the others.
            logger.warning(f"Watcher error in channel '{self.name}': {type(e).__name__}: {e}")

    def _watcher_died(self, ref):
        try:
            self.watchers.remove(ref)
        except ValueError:
            pass

    def unwatch(self, monitor_function: Callable):
        """Remove a watcher function from this channel."""
        removed = False
        for w in self.watchers[:]:
            if w is monitor_function or (isinstance(w, weakref.ref) and w() is monitor_function):
                self.watchers.remove(w)
                removed = True
        if not removed:
            logger.warning(f"Watcher {monitor_function} not found in channel '{self.name}'")

    def resize_buffer(self, new_size: int):
        """
        Dynamically resize the message buffer.

        @param new_size: New buffer size. 0 disables buffering.
        """
        if new_size == 0:
            if self.buffer is not None:
                self.buffer.clear()
            self.buffer = None
        elif self.buffer is None:
            self.buffer = deque(maxlen=new_size)
        else:
            self.buffer = deque(self.buffer, maxlen=new_size)
        self.buffer_size = new_size


_channels: Dict[str, Channel] = {}


def get_channel(name: str, *args, **kwargs) -> Channel:
    """
    Fetch the named channel, creating it on first use.

    Construction arguments only apply when the channel is created, except `timestamp`
    which may be toggled on an existing channel.
    """
    if name not in _channels:
        _channels[name] = Channel(name, *args, **kwargs)
    elif "timestamp" in kwargs and isinstance(kwargs["timestamp"], bool):
        _channels[name].timestamp = kwargs["timestamp"]
    return _channels[name]


def channel_names():
    """All registered channel names."""
    return list(_channels)
