"""bspwm 状态数据模型

One report line maps to one WmRoot:
- WmRoot -> monitors (line order)
- Monitor -> desktops (line order) + layout
- Desktop -> focus/occupied/urgent flags
"""

from dataclasses import asdict, dataclass, field
from enum import Enum


class Layout(Enum):
    """Monitor layout reported by the `L` field."""

    TILING = "tiling"
    MONOCLE = "monocle"

    @classmethod
    def from_code(cls, code: str) -> "Layout | None":
        """Map a layout code to a Layout.

        Only the first character is inspected: "T" -> TILING, "M" -> MONOCLE.
        Anything else, including an empty code, returns None.
        """
        if code.startswith("T"):
            return cls.TILING
        if code.startswith("M"):
            return cls.MONOCLE
        return None


@dataclass
class Desktop:
    """Desktop 信息"""

    name: str
    focused: bool = False
    occupied: bool = False
    urgent: bool = False


@dataclass
class Monitor:
    """Monitor 信息"""

    name: str
    desktops: list[Desktop] = field(default_factory=list)
    focused: bool = False
    layout: Layout | None = None

    @property
    def focused_desktop(self) -> Desktop | None:
        """The focused desktop on this monitor, if any."""
        return next((d for d in self.desktops if d.focused), None)

    @property
    def occupied_desktops(self) -> list[Desktop]:
        return [d for d in self.desktops if d.occupied]

    @property
    def urgent_desktops(self) -> list[Desktop]:
        return [d for d in self.desktops if d.urgent]


@dataclass
class WmRoot:
    """完整状态快照

    Attributes:
        monitors: All monitors bspwm reported, in report order
    """

    monitors: list[Monitor] = field(default_factory=list)

    @property
    def focused_monitor(self) -> Monitor | None:
        return next((m for m in self.monitors if m.focused), None)

    def get_monitor(self, name: str) -> Monitor | None:
        """Find a monitor by name (first match)."""
        return next((m for m in self.monitors if m.name == name), None)

    def to_dict(self) -> dict:
        """转换为可序列化的字典"""
        data = asdict(self)
        for monitor in data["monitors"]:
            if monitor["layout"] is not None:
                monitor["layout"] = monitor["layout"].value
        return data
