class SelectableContext:
    """
    Base for contexts wrapping an ordered selection of items.

    Selecting builds a new context of the same kind over a subset. The parent selection
    and the geometry behind it are never changed by selecting.
    """

    def __init__(self, items):
        self._items = list(items)

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __getitem__(self, item):
        return self._items[item]

    def __repr__(self):
        return f"{type(self).__name__}({len(self._items)} items)"

    @property
    def length(self):
        return len(self._items)

    def _create(self, items):
        raise NotImplementedError

    def every(self, n: int, offset: int = 0):
        """
        Select every nth item starting at offset.

        @param n: step, 1 selects everything. Values below 1 select nothing.
        @param offset: index of the first selected item
        @return: context over the selection
        """
        if n < 1 or offset < 0:
            return self._create([])
        return self._create(self._items[offset::n])

    def at(self, *indices):
        """
        Select the items at the given indices. Out of range indices are dropped.
        """
        count = len(self._items)
        return self._create([self._items[i] for i in indices if 0 <= i < count])
