# FILE: tiktok_scraper_pkg/selectors.py
"""DOM selectors and in-page scripts for the TikTok profile grid.

TikTok ships several list shapes depending on A/B buckets and locale, so the
post-list check accepts any of the known containers. Scripts are passed to
`page.evaluate` with their selectors as the argument, which keeps the JS
free of string interpolation.
"""

POST_LIST_MARKERS = [
    '[data-e2e="user-post-item-list"]',
    '[data-e2e="user-post-item"]',
    ".video-feed-container",
]

ITEM_SELECTOR = '[data-e2e="user-post-item"]'

# Primary first, then the legacy caption class.
TITLE_SELECTORS = [
    '[data-e2e="user-post-item-desc"]',
    ".video-meta-caption",
]

STAT_SELECTOR = ".video-count"
EMPHASIS_SELECTOR = "strong"


HAS_POST_LIST_JS = """
(selectors) => selectors.some((s) => document.querySelector(s) !== null)
"""

COUNT_ITEMS_JS = """
(selector) => document.querySelectorAll(selector).length
"""

SCROLL_TO_BOTTOM_JS = """
() => window.scrollTo(0, document.body.scrollHeight)
"""

# Returns one plain object per item so the Python side works on an
# immutable snapshot instead of live element handles.
SNAPSHOT_ITEMS_JS = """
(sel) => Array.from(document.querySelectorAll(sel.item)).map((el) => {
  const link = el.querySelector('a');
  const img = el.querySelector('img');
  const titles = sel.titles.map((s) => {
    const node = el.querySelector(s);
    return node ? node.textContent : null;
  });
  const stats = Array.from(el.querySelectorAll(sel.stat)).map((node) => {
    const prev = node.previousElementSibling;
    let marker = null;
    if (prev) {
      const icon = prev.querySelector('svg') || prev;
      marker = icon.outerHTML;
    }
    return { text: node.textContent, marker: marker };
  });
  const strong = Array.from(el.querySelectorAll(sel.strong)).map((node) => node.textContent);
  return {
    href: link ? link.href : '',
    src: img ? img.src : '',
    titles: titles,
    stats: stats,
    strong: strong,
  };
})
"""


def snapshot_args() -> dict:
    return {
        "item": ITEM_SELECTOR,
        "titles": list(TITLE_SELECTORS),
        "stat": STAT_SELECTOR,
        "strong": EMPHASIS_SELECTOR,
    }
