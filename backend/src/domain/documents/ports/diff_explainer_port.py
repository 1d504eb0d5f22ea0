"""Diff Explainer Port - optional collaborator that describes how two files differ.

No adapter ships with the service; the comparison engine works without one
and only consults it for eligible files whose contents differ.
"""

from abc import ABC, abstractmethod

from ..models import ComparableFile


class DiffExplainerPort(ABC):
    """Port interface for generating a human-readable difference summary."""

    @abstractmethod
    async def explain(self, file_a: ComparableFile, file_b: ComparableFile) -> str:
        """Describe the differences between two same-typed files.

        Args:
            file_a: First file
            file_b: Second file (same declared type as file_a)

        Returns:
            str: Summary suitable for display next to the verdict
        """
        pass
