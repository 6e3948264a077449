from typing import Dict, List, Optional, Sequence

from cashflow.exceptions import BoardError
from cashflow.game.spaces import Circle, Space, SpaceType


# (name, type) in board order; position == index
_RAT_RACE_LAYOUT = [
    ("Payday", SpaceType.PAYDAY),
    ("Opportunity", SpaceType.OPPORTUNITY),
    ("Market", SpaceType.MARKET),
    ("Doodads", SpaceType.DOODADS),
    ("Opportunity", SpaceType.OPPORTUNITY),
    ("Baby", SpaceType.BABY),
    ("Downsize", SpaceType.DOWNSIZE),
    ("Opportunity", SpaceType.OPPORTUNITY),
    ("Market", SpaceType.MARKET),
    ("Charity", SpaceType.CHARITY),
    ("Doodads", SpaceType.DOODADS),
    ("Opportunity", SpaceType.OPPORTUNITY),
    ("Market", SpaceType.MARKET),
    ("Opportunity", SpaceType.OPPORTUNITY),
    ("Baby", SpaceType.BABY),
    ("Doodads", SpaceType.DOODADS),
    ("Opportunity", SpaceType.OPPORTUNITY),
    ("Market", SpaceType.MARKET),
    ("Opportunity", SpaceType.OPPORTUNITY),
    ("Exit to Fast Track", SpaceType.EXIT),
]


class Board:
    """The Rat Race board: a dense list of spaces indexed by position."""

    def __init__(self, spaces: Optional[Sequence[Space]] = None):
        self.spaces: List[Space] = list(spaces) if spaces is not None else self._create_standard_board()
        self._validate()
        self.positions_by_type: Dict[SpaceType, List[int]] = self._build_type_index()

    def _create_standard_board(self) -> List[Space]:
        """Create the standard 20-space Rat Race board."""
        return [
            Space(position, name, space_type, position, Circle.RAT_RACE)
            for position, (name, space_type) in enumerate(_RAT_RACE_LAYOUT)
        ]

    def _validate(self) -> None:
        if not self.spaces:
            raise BoardError("Board must contain at least one space")

        for index, space in enumerate(self.spaces):
            if space.position != index:
                raise BoardError(
                    f"Space positions must be contiguous from 0: "
                    f"'{space.name}' at index {index} has position {space.position}"
                )

        exits = [s for s in self.spaces if s.space_type == SpaceType.EXIT]
        if len(exits) != 1:
            raise BoardError(f"Board must have exactly one exit space, found {len(exits)}")

    def _build_type_index(self) -> Dict[SpaceType, List[int]]:
        """Build a mapping of space type to positions."""
        index: Dict[SpaceType, List[int]] = {}
        for space in self.spaces:
            index.setdefault(space.space_type, []).append(space.position)
        return index

    def __len__(self) -> int:
        return len(self.spaces)

    def get_space(self, position: int) -> Space:
        """Get the space at the given position."""
        return self.spaces[position % len(self.spaces)]

    def get_positions(self, space_type: SpaceType) -> List[int]:
        """Get all positions holding spaces of a type."""
        return self.positions_by_type.get(space_type, [])

    def advance(self, position: int, spaces: int) -> int:
        """Position reached after moving forward, wrapping around the board."""
        return (position + spaces) % len(self.spaces)
