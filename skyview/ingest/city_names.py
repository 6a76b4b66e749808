"""Map localized city names to the Latin names the weather API resolves."""

import re

LATIN_NAME_RE = re.compile(r"^[a-zA-Z\s]+$")

CITY_NAME_MAPPING: dict[str, str] = {
    "北京": "Beijing",
    "上海": "Shanghai",
    "广州": "Guangzhou",
    "深圳": "Shenzhen",
    "杭州": "Hangzhou",
    "南京": "Nanjing",
    "成都": "Chengdu",
    "重庆": "Chongqing",
    "天津": "Tianjin",
    "武汉": "Wuhan",
    "西安": "Xi'an",
    "苏州": "Suzhou",
    "长沙": "Changsha",
    "沈阳": "Shenyang",
    "青岛": "Qingdao",
    "郑州": "Zhengzhou",
    "大连": "Dalian",
    "宁波": "Ningbo",
    "厦门": "Xiamen",
    "福州": "Fuzhou",
    "济南": "Jinan",
    "昆明": "Kunming",
    "哈尔滨": "Harbin",
    "长春": "Changchun",
    "石家庄": "Shijiazhuang",
    "合肥": "Hefei",
    "太原": "Taiyuan",
    "南昌": "Nanchang",
    "贵阳": "Guiyang",
    "南宁": "Nanning",
    "兰州": "Lanzhou",
    "海口": "Haikou",
    "呼和浩特": "Hohhot",
    "银川": "Yinchuan",
    "西宁": "Xining",
    "拉萨": "Lhasa",
    "乌鲁木齐": "Urumqi",
}


def normalize_city_name(city: str) -> str:
    """Return the name to send as ``q=``.

    Latin-only names pass through trimmed. Known localized names are mapped;
    anything else is returned trimmed and left for the API to accept or reject.
    """
    trimmed = city.strip()
    if LATIN_NAME_RE.match(trimmed):
        return trimmed
    return CITY_NAME_MAPPING.get(trimmed, trimmed)
