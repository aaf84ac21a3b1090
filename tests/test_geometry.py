"""Tests for panel geometry and the debounce token."""

from brewdeck.models import PackageRef
from brewdeck.session.debounce import Debounce
from brewdeck.session.geometry import DEFAULT_HEIGHT, DEFAULT_WIDTH, compute_geometry


class TestGeometry:
    """Test layout arithmetic."""

    def test_regular_terminal(self):
        """Panels split the content area by their shares."""
        geometry = compute_geometry(100, 41)

        assert geometry.content_height == 40
        assert (geometry.search_height, geometry.dependencies_height, geometry.logs_height) == (14, 14, 12)
        assert geometry.left_width == geometry.right_width == 50
        assert geometry.installed_lines == 35
        assert geometry.search_lines == 8

    def test_odd_width(self):
        """The right column takes the extra column."""
        geometry = compute_geometry(81, 24)
        assert geometry.left_width == 40
        assert geometry.right_width == 41

    def test_tiny_terminal_keeps_minimums(self):
        """Line counts never drop below their minimums."""
        geometry = compute_geometry(10, 5)

        assert geometry.installed_lines == 1
        assert geometry.search_lines == 2
        assert geometry.dependencies_lines == 1
        assert geometry.log_lines == 1

    def test_unknown_size_uses_defaults(self):
        """A zero size falls back to 80x24."""
        geometry = compute_geometry(0, 0)
        assert (geometry.width, geometry.height) == (DEFAULT_WIDTH, DEFAULT_HEIGHT)


class TestDebounce:
    """Test the detail-load fencing token."""

    def test_bump_increments(self):
        """Each bump issues a newer token for the new package."""
        debounce = Debounce().bump(PackageRef("git")).bump(PackageRef("wget"))

        assert debounce.token == 2
        assert debounce.ref == PackageRef("wget")

    def test_only_latest_token_is_current(self):
        """Older tokens are superseded."""
        debounce = Debounce().bump(PackageRef("git"))
        newer = debounce.bump(PackageRef("wget"))

        assert newer.is_current(2)
        assert not newer.is_current(debounce.token)
