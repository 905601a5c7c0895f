"""
Built-in gazetteer of major Chinese cities

Answers the most common search queries without any network request.
"""

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .models import Coordinate, LocationCandidate

MIN_PREFIX_LENGTH = 3


@dataclass(frozen=True)
class GazetteerEntry:
    name: str
    alias: str  # Latin spelling, lowercase without separators
    latitude: float
    longitude: float
    address: str

    def toCandidate(self) -> LocationCandidate:
        return LocationCandidate(
            coordinate=Coordinate(longitude=self.longitude, latitude=self.latitude),
            displayName=self.name,
            address=self.address,
        )


CITIES: Tuple[GazetteerEntry, ...] = (
    GazetteerEntry("北京", "beijing", 39.9042, 116.4074, "中国 北京市"),
    GazetteerEntry("上海", "shanghai", 31.2304, 121.4737, "中国 上海市"),
    GazetteerEntry("广州", "guangzhou", 23.1291, 113.2644, "中国 广东省 广州市"),
    GazetteerEntry("深圳", "shenzhen", 22.5431, 114.0579, "中国 广东省 深圳市"),
    GazetteerEntry("杭州", "hangzhou", 30.2741, 120.1551, "中国 浙江省 杭州市"),
    GazetteerEntry("南京", "nanjing", 32.0603, 118.7969, "中国 江苏省 南京市"),
    GazetteerEntry("成都", "chengdu", 30.5728, 104.0668, "中国 四川省 成都市"),
    GazetteerEntry("西安", "xian", 34.3416, 108.9398, "中国 陕西省 西安市"),
    GazetteerEntry("武汉", "wuhan", 30.5928, 114.3055, "中国 湖北省 武汉市"),
    GazetteerEntry("重庆", "chongqing", 29.5647, 106.5507, "中国 重庆市"),
    GazetteerEntry("天津", "tianjin", 39.3434, 117.3616, "中国 天津市"),
    GazetteerEntry("苏州", "suzhou", 31.2989, 120.5853, "中国 江苏省 苏州市"),
    GazetteerEntry("青岛", "qingdao", 36.0986, 120.3719, "中国 山东省 青岛市"),
    GazetteerEntry("大连", "dalian", 38.9140, 121.6147, "中国 辽宁省 大连市"),
    GazetteerEntry("厦门", "xiamen", 24.4798, 118.0894, "中国 福建省 厦门市"),
    GazetteerEntry("长沙", "changsha", 28.2282, 112.9388, "中国 湖南省 长沙市"),
    GazetteerEntry("济南", "jinan", 36.6512, 117.1201, "中国 山东省 济南市"),
    GazetteerEntry("哈尔滨", "harbin", 45.8038, 126.5349, "中国 黑龙江省 哈尔滨市"),
    GazetteerEntry("郑州", "zhengzhou", 34.7466, 113.6254, "中国 河南省 郑州市"),
    GazetteerEntry("长春", "changchun", 43.8171, 125.3235, "中国 吉林省 长春市"),
    GazetteerEntry("沈阳", "shenyang", 41.8057, 123.4315, "中国 辽宁省 沈阳市"),
    GazetteerEntry("昆明", "kunming", 25.0389, 102.7183, "中国 云南省 昆明市"),
    GazetteerEntry("福州", "fuzhou", 26.0745, 119.2965, "中国 福建省 福州市"),
    GazetteerEntry("无锡", "wuxi", 31.4912, 120.3124, "中国 江苏省 无锡市"),
    GazetteerEntry("合肥", "hefei", 31.8206, 117.2272, "中国 安徽省 合肥市"),
    GazetteerEntry("石家庄", "shijiazhuang", 38.0428, 114.5149, "中国 河北省 石家庄市"),
    GazetteerEntry("宁波", "ningbo", 29.8683, 121.5440, "中国 浙江省 宁波市"),
    GazetteerEntry("佛山", "foshan", 23.0218, 113.1219, "中国 广东省 佛山市"),
    GazetteerEntry("东莞", "dongguan", 23.0489, 113.7447, "中国 广东省 东莞市"),
    GazetteerEntry("温州", "wenzhou", 28.0000, 120.6667, "中国 浙江省 温州市"),
    GazetteerEntry("泉州", "quanzhou", 24.8740, 118.6757, "中国 福建省 泉州市"),
    GazetteerEntry("烟台", "yantai", 37.5365, 121.3914, "中国 山东省 烟台市"),
    GazetteerEntry("嘉兴", "jiaxing", 30.7467, 120.7550, "中国 浙江省 嘉兴市"),
    GazetteerEntry("金华", "jinhua", 29.1028, 119.6472, "中国 浙江省 金华市"),
    GazetteerEntry("台州", "taizhou", 28.6568, 121.4281, "中国 浙江省 台州市"),
    GazetteerEntry("绍兴", "shaoxing", 30.0023, 120.5810, "中国 浙江省 绍兴市"),
    GazetteerEntry("湖州", "huzhou", 30.8703, 120.0937, "中国 浙江省 湖州市"),
    GazetteerEntry("丽水", "lishui", 28.4517, 119.9219, "中国 浙江省 丽水市"),
    GazetteerEntry("衢州", "quzhou", 28.9700, 118.8733, "中国 浙江省 衢州市"),
    GazetteerEntry("舟山", "zhoushan", 30.0360, 122.2070, "中国 浙江省 舟山市"),
)


def _latinTokens(query: str) -> List[str]:
    return [token.replace("'", "").replace("-", "") for token in re.split(r"[\s,;/]+", query.lower()) if token]


class Gazetteer:
    """
    Offline city lookup

    An entry matches when its name contains the query, the query contains
    its name, or its address contains the query. Latin queries match the
    alias ("Hangzhou", "xi'an", "hangz...") case-insensitively.

    Example:
        >>> Gazetteer().search("杭州")[0].coordinate
        Coordinate(longitude=120.1551, latitude=30.2741)
    """

    def __init__(self, entries: Sequence[GazetteerEntry] = CITIES):
        self.entries = tuple(entries)

    def _matches(self, entry: GazetteerEntry, query: str) -> bool:
        if entry.name in query or query in entry.name or query in entry.address:
            return True

        tokens = _latinTokens(query)
        if entry.alias in tokens or "".join(tokens) == entry.alias:
            return True
        # Prefix of the alias, e.g. while typing
        joined = "".join(tokens)
        return len(joined) >= MIN_PREFIX_LENGTH and entry.alias.startswith(joined)

    def search(self, query: str) -> List[LocationCandidate]:
        """Find matching cities in table order, blank query matches nothing"""
        query = query.strip()
        if not query:
            return []
        return [entry.toCandidate() for entry in self.entries if self._matches(entry, query)]
