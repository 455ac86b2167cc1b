"""
Canonical rule templates for every rule group.

The templates are used both to scaffold new sources and to fill the gaps of
partial or legacy rule groups loaded from storage.
"""

from __future__ import annotations

__all__ = [
    "RULE_GROUP_META",
    "RULE_TEMPLATES",
    "RULE_TYPE_OPTIONS",
    "RuleGroupMeta",
    "RuleTemplate",
]

from typing import NotRequired, TypedDict

from novelsource.schemas import RuleGroupKey, SelectorDialect


class RuleTemplate(TypedDict):
    key: str
    label: str
    placeholder: NotRequired[str]
    description: NotRequired[str]


class RuleGroupMeta(TypedDict):
    key: RuleGroupKey
    title: str
    description: str


RULE_GROUP_META: list[RuleGroupMeta] = [
    {
        "key": RuleGroupKey.BASIC,
        "title": "基本",
        "description": "站点、编码、请求头等基础配置",
    },
    {
        "key": RuleGroupKey.SEARCH,
        "title": "搜索",
        "description": "搜索入口、结果解析、分页配置",
    },
    {
        "key": RuleGroupKey.DISCOVER,
        "title": "发现",
        "description": "发现频道、分类导航、数据提取",
    },
    {
        "key": RuleGroupKey.DETAIL,
        "title": "详情",
        "description": "书籍详情字段解析规则",
    },
    {
        "key": RuleGroupKey.CATALOG,
        "title": "目录",
        "description": "章节列表、分页、加密处理",
    },
    {
        "key": RuleGroupKey.CONTENT,
        "title": "正文",
        "description": "正文内容、排版、图像处理",
    },
]

RULE_TEMPLATES: dict[RuleGroupKey, list[RuleTemplate]] = {
    RuleGroupKey.BASIC: [
        {"key": "baseUrl", "label": "站点根地址", "placeholder": "https://example.com"},
        {"key": "charset", "label": "页面编码", "placeholder": "utf-8"},
        {
            "key": "headers",
            "label": "自定义请求头",
            "placeholder": '{"User-Agent": "..."}',
            "description": "以 JSON 格式书写",
        },
        {
            "key": "ruleType",
            "label": "规则类型",
            "placeholder": "css / xpath / jsonpath / regex",
        },
    ],
    RuleGroupKey.SEARCH: [
        {
            "key": "searchUrl",
            "label": "搜索地址",
            "placeholder": "https://example.com/search?q={{key}}",
        },
        {"key": "itemSelector", "label": "搜索列表规则", "placeholder": ".result-item"},
        {"key": "titleSelector", "label": "书名规则", "placeholder": ".title"},
        {"key": "authorSelector", "label": "作者规则", "placeholder": ".author"},
        {"key": "categorySelector", "label": "分类规则", "placeholder": ".category"},
        {"key": "introSelector", "label": "简介规则", "placeholder": ".intro"},
        {"key": "coverSelector", "label": "封面规则", "placeholder": ".cover"},
        {
            "key": "detailSelector",
            "label": "详情页地址规则",
            "placeholder": ".detail-url",
        },
        {"key": "nextPage", "label": "翻页规则", "placeholder": "a.next"},
    ],
    RuleGroupKey.DISCOVER: [
        {
            "key": "channels",
            "label": "发现频道配置",
            "placeholder": '[{"title":"玄幻","url":"/xuanhuan"}]',
        },
        {"key": "itemSelector", "label": "列表项规则", "placeholder": ".book-item"},
        {"key": "titleSelector", "label": "书名规则", "placeholder": ".book-title"},
        {"key": "authorSelector", "label": "作者规则", "placeholder": ".author"},
        {"key": "categorySelector", "label": "分类规则", "placeholder": ".category"},
        {"key": "introSelector", "label": "简介规则", "placeholder": ".intro"},
        {
            "key": "coverSelector",
            "label": "封面规则",
            "placeholder": ".book-cover img::attr(src)",
        },
        {
            "key": "detailSelector",
            "label": "详情页地址规则",
            "placeholder": ".detail-url",
        },
        {"key": "nextPage", "label": "翻页规则", "placeholder": "a.next"},
    ],
    RuleGroupKey.DETAIL: [
        {"key": "title", "label": "书名规则", "placeholder": ".detail-title"},
        {"key": "author", "label": "作者规则", "placeholder": ".detail-author"},
        {"key": "intro", "label": "简介规则", "placeholder": ".detail-intro"},
        {"key": "cover", "label": "封面规则", "placeholder": ".cover"},
        {"key": "dir", "label": "目录规则", "placeholder": ".list > li"},
        {"key": "latestChapter", "label": "最新章节规则", "placeholder": ".list > li"},
        {"key": "updateTime", "label": "更新时间规则", "placeholder": ".update-time"},
    ],
    RuleGroupKey.CATALOG: [
        {
            "key": "chapterList",
            "label": "章节列表规则",
            "placeholder": ".chapter-list li",
        },
        {"key": "chapterTitle", "label": "章节标题规则", "placeholder": "a"},
        {
            "key": "chapterUrl",
            "label": "章节链接规则",
            "placeholder": "a::attr(href)",
        },
        {"key": "updateTime", "label": "更新时间规则", "placeholder": ".update-time"},
        {"key": "nextPage", "label": "翻页规则", "placeholder": "a.next"},
    ],
    RuleGroupKey.CONTENT: [
        {"key": "content", "label": "正文规则", "placeholder": ".content"},
        {
            "key": "filter",
            "label": "内容过滤规则",
            "placeholder": "正则: ^广告 / CSS: .ads",
        },
        {
            "key": "image",
            "label": "图片提取规则",
            "placeholder": ".content img::attr(src)",
        },
        {"key": "nextPage", "label": "正文下一页规则", "placeholder": "a.next"},
    ],
}

RULE_TYPE_OPTIONS: list[tuple[str, SelectorDialect]] = [
    ("CSS", SelectorDialect.CSS),
    ("XPath", SelectorDialect.XPATH),
    ("JSONPath", SelectorDialect.JSONPATH),
    ("Regex", SelectorDialect.REGEX),
]
