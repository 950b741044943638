"""Slide sequence and bounded navigation for the slides template."""

from typing import List, Optional, Sequence
from pydantic import BaseModel

from src.models import Project


class Slide(BaseModel):
    """One entry of the flattened deck."""
    kind: str  # intro | project | image
    project: Optional[Project] = None
    image: Optional[str] = None


def build_slides(projects: Sequence[Project]) -> List[Slide]:
    """
    Flatten into intro, then per project its main slide followed by one
    slide per secondary image.
    """
    slides = [Slide(kind="intro")]
    for project in projects:
        slides.append(Slide(kind="project", project=project))
        for image in project.images[1:]:
            slides.append(Slide(kind="image", project=project, image=image))
    return slides


class SlideDeck:
    """Current slide index clamped to ``[0, len - 1]``. No wraparound."""

    def __init__(self, slides: Sequence[Slide], index: int = 0):
        self.slides = list(slides)
        self.index = 0
        self.go_to(index)

    def __len__(self) -> int:
        return len(self.slides)

    @property
    def current(self) -> Optional[Slide]:
        if not self.slides:
            return None
        return self.slides[self.index]

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index >= len(self.slides) - 1

    def go_to(self, index: int) -> int:
        last = max(len(self.slides) - 1, 0)
        self.index = min(max(index, 0), last)
        return self.index

    def next(self) -> int:
        return self.go_to(self.index + 1)

    def previous(self) -> int:
        return self.go_to(self.index - 1)
