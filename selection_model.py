from data_store import Cell


class SelectionModel:
    """Selected cells plus the anchor that range gestures extend from."""

    def __init__(self, layout):
        self.layout = layout
        self._cells: set[Cell] = set()
        self.anchor: Cell | None = None
        self.drag_active = False

    @property
    def cells(self) -> frozenset:
        return frozenset(self._cells)

    def __len__(self):
        return len(self._cells)

    def __contains__(self, cell):
        return Cell(*cell) in self._cells

    def is_selected(self, row: int, column: str) -> bool:
        return Cell(row, column) in self._cells

    def select_cell(self, row: int, column: str, is_multi=False, is_range=False):
        target = Cell(row, column)
        if is_range and self.anchor is not None:
            rect = self._rect(self.anchor, target)
            if rect is not None:
                self._cells = rect
                return
        if is_multi:
            if target in self._cells:
                self._cells.discard(target)
            else:
                self._cells.add(target)
            self.anchor = target
            return
        self._cells = {target}
        self.anchor = target

    def add_cell_to_selection(self, row: int, column: str):
        self._cells.add(Cell(row, column))

    def clear_selection(self):
        self._cells = set()
        self.anchor = None

    def begin_drag(self, row: int, column: str, is_multi=False):
        self.select_cell(row, column, is_multi=is_multi)
        self.drag_active = True

    def drag_over(self, row: int, column: str):
        if self.drag_active:
            self.add_cell_to_selection(row, column)

    def end_drag(self):
        self.drag_active = False

    def _rect(self, a: Cell, b: Cell):
        ca = self.layout.position(a.column)
        cb = self.layout.position(b.column)
        if ca is None or cb is None:
            return None
        r0, r1 = sorted((a.row, b.row))
        c0, c1 = sorted((ca, cb))
        columns = self.layout.order[c0 : c1 + 1]
        return {Cell(r, col) for r in range(r0, r1 + 1) for col in columns}

    def sorted_cells(self) -> list[Cell]:
        def key(cell):
            pos = self.layout.position(cell.column)
            return (cell.row, len(self.layout) if pos is None else pos, cell.column)

        return sorted(self._cells, key=key)

    def bounds(self):
        """(r0, r1, c0, c1) in display positions, or None when empty."""
        positions = [
            (cell.row, self.layout.position(cell.column)) for cell in self._cells
        ]
        positions = [(r, c) for r, c in positions if c is not None]
        if not positions:
            return None
        rows = [r for r, _ in positions]
        cols = [c for _, c in positions]
        return (min(rows), max(rows), min(cols), max(cols))
