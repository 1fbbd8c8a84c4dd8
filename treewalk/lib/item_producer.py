"""Pull-style producers and an iterator adapter over them.

A producer is asked for one item at a time and answers None once it has
nothing more to give. That is often easier to write than an iterator when
the only way to know whether another item exists is to try to make one.

Usage:
    it = ProducerIterator(producer)
    while it.has_next():
        item = it.next()
        # do something with item
or
    for item in ProducerIterator(producer):
        # do something with item
"""

from abc import ABC, abstractmethod


class NoSuchElementError(LookupError):
    """Raised when next() is called on an exhausted iterator."""


class UnsupportedOperationError(Exception):
    """Raised for operations the iterator does not implement."""


class ItemProducer(ABC):
    """Abstract base class for anything producing a stream of items."""

    @abstractmethod
    def produce(self):
        """
        Return the next item, or None if no more items.

        Once None has been returned, every later call must return None too.
        """
        pass


class ProducerIterator:
    """A forward-only iterator over the items of an ItemProducer.

    Holds at most one item produced ahead of time by has_next(). The
    producer is never called again after it has signalled the end.
    """

    def __init__(self, producer: ItemProducer):
        self.producer = producer
        self._next = None
        self.done = False

    def _produce(self):
        if self.done:
            return None
        item = self.producer.produce()
        if item is None:
            self.done = True
        return item

    def has_next(self) -> bool:
        """Return True if another item is available, buffering it if needed."""
        if self._next is None:
            self._next = self._produce()
        return self._next is not None

    def next(self):
        """Return the next item.

        Raises:
            NoSuchElementError: if the producer is exhausted.
        """
        item = self._next if self._next is not None else self._produce()
        self._next = None
        if item is None:
            raise NoSuchElementError("no more items")
        return item

    def remove(self):
        raise UnsupportedOperationError("remove() is not supported")

    def is_done(self) -> bool:
        """Return True if all items have been consumed."""
        return self.done and self._next is None

    def __iter__(self):
        return self

    def __next__(self):
        try:
            return self.next()
        except NoSuchElementError:
            raise StopIteration from None
