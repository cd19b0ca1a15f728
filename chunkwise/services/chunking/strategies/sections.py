"""Section builder: groups blocks under their heading ancestry."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from chunkwise.schema.document import Block


@dataclass(slots=True)
class Section:
    """A heading (None for the root section) plus the blocks beneath it up to the next heading."""

    heading: Block | None
    blocks: list[Block] = field(default_factory=list)
    level: int = 0
    section_path: list[str] = field(default_factory=list)

    @property
    def first_block(self) -> Block | None:
        if self.heading is not None:
            return self.heading
        return self.blocks[0] if self.blocks else None

    @property
    def all_blocks(self) -> list[Block]:
        return ([self.heading] if self.heading is not None else []) + self.blocks


def build_sections(blocks: Sequence[Block]) -> list[Section]:
    """
    Walk blocks in order keeping a stack of open headings. A heading at level L
    closes every open heading at level >= L; its section path is the remaining
    ancestors' texts plus its own. A heading directly followed by another heading
    still forms its own (childless) section so no heading text is lost.
    """
    sections: list[Section] = []
    stack: list[Block] = []
    current: Section | None = None

    for block in blocks:
        if block.is_heading:
            level = block.level or 1
            while stack and (stack[-1].level or 1) >= level:
                stack.pop()
            path = [h.text for h in stack] + [block.text]
            if current is not None:
                sections.append(current)
            current = Section(heading=block, level=level, section_path=path)
            stack.append(block)
        else:
            if current is None:
                current = Section(heading=None)
            current.blocks.append(block)

    if current is not None:
        sections.append(current)
    return sections
