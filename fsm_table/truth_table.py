"""
Ternary truth table container.

Rows are addressed by the input variables, first variable = MSB:

    row = b[0] * 2^(n-1) + ... + b[n-1]

Each result column stores one ternary value per row: 0, 1 or DONT_CARE.
Printed tables use the usual notation 1 = ON, 0 = OFF, - = don't care.
"""

from typing import Union

DONT_CARE = 2

_SYMBOLS = {0: "0", 1: "1", DONT_CARE: "-"}

Column = Union[int, str]


class TruthTable:
    """
    Truth table with named input variables and named result columns.

    Appending an input variable with add_variable() makes it the new least
    significant bit: every existing row r is replicated to rows 2r and 2r+1,
    so after k appends the old row r owns the block [r * 2^k, (r+1) * 2^k).
    """

    def __init__(self, variables: list[str]):
        self.variables: list[str] = list(variables)
        self.results: list[str] = []
        self._columns: list[bytearray] = []

    @property
    def rows(self) -> int:
        """Number of rows, 2 ** number of input variables."""
        return 1 << len(self.variables)

    def add_result(self, name: str) -> int:
        """Append a result column filled with zeros and return its index."""
        if name in self.results:
            raise ValueError(f"Result {name!r} already exists")
        self.results.append(name)
        self._columns.append(bytearray(self.rows))
        return len(self.results) - 1

    def add_variable(self, name: str):
        """Append a new least significant input variable, doubling the rows."""
        if name in self.variables:
            raise ValueError(f"Variable {name!r} already exists")
        self.variables.append(name)
        for i, column in enumerate(self._columns):
            expanded = bytearray(len(column) * 2)
            expanded[0::2] = column
            expanded[1::2] = column
            self._columns[i] = expanded

    def set_all_to(self, value: int):
        """Set every cell of every result column to value."""
        _check_value(value)
        for i, column in enumerate(self._columns):
            self._columns[i] = bytearray([value]) * len(column)

    def result_index(self, column: Column) -> int:
        if isinstance(column, str):
            try:
                return self.results.index(column)
            except ValueError:
                raise KeyError(f"Unknown result {column!r}") from None
        if not 0 <= column < len(self.results):
            raise IndexError(f"Result index {column} out of range")
        return column

    def set_value(self, row: int, column: Column, value: int):
        _check_value(value)
        self._columns[self.result_index(column)][row] = value

    def get_value(self, row: int, column: Column) -> int:
        return self._columns[self.result_index(column)][row]

    def get_result(self, column: Column) -> list[int]:
        """Return a copy of all values of one result column."""
        return list(self._columns[self.result_index(column)])

    def minterms(self, column: Column) -> set[int]:
        """Rows where the result is 1 (the ON-set)."""
        values = self._columns[self.result_index(column)]
        return {row for row, v in enumerate(values) if v == 1}

    def dont_cares(self, column: Column) -> set[int]:
        """Rows where the result is unspecified."""
        values = self._columns[self.result_index(column)]
        return {row for row, v in enumerate(values) if v == DONT_CARE}

    def column_string(self, column: Column) -> str:
        """Result column as a string, e.g. "10-1" (row 0 first)."""
        values = self._columns[self.result_index(column)]
        return "".join(_SYMBOLS[v] for v in values)

    def row_bits(self, row: int) -> tuple[int, ...]:
        """Convert a row index to its input bits, first variable first."""
        n = len(self.variables)
        return tuple((row >> (n - 1 - i)) & 1 for i in range(n))

    def format_table(self) -> str:
        """Render the complete table, one line per row."""
        in_width = [max(len(v), 1) for v in self.variables]
        out_width = [max(len(r), 1) for r in self.results]

        header = " ".join(f"{v:>{w}}" for v, w in zip(self.variables, in_width))
        header += " | "
        header += " ".join(f"{r:>{w}}" for r, w in zip(self.results, out_width))
        lines = [header, "-" * len(header)]

        for row in range(self.rows):
            bits = self.row_bits(row)
            line = " ".join(f"{b:>{w}}" for b, w in zip(bits, in_width))
            line += " | "
            line += " ".join(
                f"{_SYMBOLS[col[row]]:>{w}}" for col, w in zip(self._columns, out_width)
            )
            lines.append(line)

        return "\n".join(lines)

    def __eq__(self, other):
        if not isinstance(other, TruthTable):
            return NotImplemented
        return (
            self.variables == other.variables
            and self.results == other.results
            and self._columns == other._columns
        )

    def __repr__(self):
        return (
            f"TruthTable(variables={self.variables}, results={self.results}, "
            f"rows={self.rows})"
        )


def _check_value(value: int):
    if value not in _SYMBOLS:
        raise ValueError(f"Invalid truth table value: {value!r}")
