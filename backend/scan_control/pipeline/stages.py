"""
流水线阶段参数表

职责：
1. 定义幅面查找表
2. 定义分辨率规则
"""

from __future__ import annotations

from ..models import Geometry, PageSize

# 幅面查找表；不在表内（含 letter 与缺省）使用设备默认幅面
GEOMETRY_TABLE: dict[PageSize, Geometry] = {
    # A4 21cm x 29.7cm
    PageSize.A4: Geometry(page_width=210, page_height=297, x=210, y=297),
    # legal 8.5 x 14
    PageSize.LEGAL: Geometry(page_width=215.9, page_height=355.6, x=215.9, y=355.6),
    # max 8.7 x 34
    PageSize.MAX: Geometry(page_width=221.121, page_height=863.489, x=221.121, y=863.489),
}

RESOLUTION_JPG = 300
RESOLUTION_DEFAULT = 200
