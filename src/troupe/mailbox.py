"""Per-actor mailbox.

An unbounded FIFO queue of pending messages. The mailbox is only ever
touched by the node's scheduler, which is what stands in for locking.
"""

from __future__ import annotations

from collections import deque


class Mailbox[M]:
    """Unbounded FIFO message queue owned by a single actor.

    Wraps a ``collections.deque``. Unlike an ``asyncio.Queue`` it never
    blocks: the scheduler decides when a message is taken out, so ``pop``
    is synchronous and fails loudly on an empty mailbox.

    Examples
    --------
    >>> mb = Mailbox[str]()
    >>> mb.put("hello")
    >>> mb.pop()
    'hello'
    """

    def __init__(self) -> None:
        self._queue: deque[M] = deque()

    def put(self, msg: M) -> None:
        """Append a message to the back of the mailbox.

        Parameters
        ----------
        msg : M
            The message to enqueue.
        """
        self._queue.append(msg)

    def pop(self) -> M:
        """Remove and return the message at the front of the mailbox.

        Returns
        -------
        M
            The oldest pending message.

        Raises
        ------
        IndexError
            If the mailbox is empty.
        """
        return self._queue.popleft()

    def drain(self) -> list[M]:
        """Remove and return every pending message in arrival order.

        Examples
        --------
        >>> mb = Mailbox[int]()
        >>> mb.put(1)
        >>> mb.put(2)
        >>> mb.drain()
        [1, 2]
        >>> mb.empty()
        True
        """
        pending = list(self._queue)
        self._queue.clear()
        return pending

    def size(self) -> int:
        """Return the number of messages currently in the mailbox.

        Examples
        --------
        >>> mb = Mailbox[int]()
        >>> mb.put(42)
        >>> mb.size()
        1
        """
        return len(self._queue)

    def empty(self) -> bool:
        """Return whether the mailbox has no messages.

        Examples
        --------
        >>> Mailbox[int]().empty()
        True
        """
        return not self._queue
