"""Classpath normalization for generation runs."""

from collections.abc import Iterable


class ClasspathResolver:
    """Normalizes a raw classpath into an ordered, duplicate-free set.

    The project's own output directories are removed so the engine never
    compiles against the results of the build it is part of.
    """

    def resolve(
        self,
        raw_classpath: Iterable[str] | None,
        output_dir: str | None,
        test_output_dir: str | None,
    ) -> list[str]:
        """Resolve the classpath.

        Args:
            raw_classpath: Classpath entries in declaration order.
            output_dir: Main output directory of the project.
            test_output_dir: Test output directory of the project.

        Returns:
            Entries in first-occurrence order, without duplicates, blank
            entries or the two output directories.
        """
        if not raw_classpath:
            return []

        excluded = {output_dir, test_output_dir}
        # dict keeps insertion order and gives set semantics
        entries: dict[str, None] = {}
        for entry in raw_classpath:
            if entry in excluded or not entry.strip():
                continue
            entries.setdefault(entry, None)

        return list(entries)
