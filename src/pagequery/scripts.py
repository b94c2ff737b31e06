"""JavaScript evaluated in the page by the query engine.

Each constant is a function expression passed to ``evaluate`` together with a
single JSON argument, so query strings never get spliced into source text.
Scripts return raw element data only; visibility, scoring, ordering and
truncation of search results happen on the Python side.
"""

from __future__ import annotations

REF_ATTRIBUTE = "data-pagequery-ref"

# Returns the total match count and raw data for the [offset, offset + limit)
# slice, tagging each sliced element with a ref if it has none yet. Text is only
# capped for transfer here (slice counts UTF-16 units); the engine truncates it.
SELECTOR_QUERY_JS = """
({selector, offset, limit, includeAttributes, maxTextLength, refAttribute}) => {
  const elements = document.querySelectorAll(selector);
  const stamp = Date.now();
  const end = Math.min(elements.length, offset + limit);
  const results = [];

  for (let i = offset; i < end; i++) {
    const el = elements[i];
    const rect = el.getBoundingClientRect();
    if (!el.hasAttribute(refAttribute)) {
      el.setAttribute(refAttribute, 'query-' + i + '-' + stamp);
    }
    results.push({
      index: i,
      tag_name: el.tagName.toLowerCase(),
      text: (el.textContent || '').trim().slice(0, maxTextLength * 2),
      rect: {top: rect.top, left: rect.left, width: rect.width, height: rect.height},
      attributes: includeAttributes
        ? Array.from(el.attributes, (attr) => [attr.name, attr.value])
        : null,
      ref: el.getAttribute(refAttribute),
    });
  }

  return {
    total_count: elements.length,
    viewport: {width: window.innerWidth, height: window.innerHeight},
    elements: results,
  };
}
"""

# Collects every non-script/style element whose direct text or any attribute
# value contains the search text, in document order. The matched nodes are
# parked under a token so SEARCH_TAG_JS can tag the exact same nodes later.
SEARCH_COLLECT_JS = """
({searchText}) => {
  const needle = searchText.toLowerCase();
  const nodes = [];
  const candidates = [];

  for (const el of document.querySelectorAll('*')) {
    const tagName = el.tagName.toLowerCase();
    if (tagName === 'script' || tagName === 'style') continue;

    let directText = '';
    for (const node of el.childNodes) {
      if (node.nodeType === Node.TEXT_NODE) directText += node.textContent;
    }
    const attributes = Array.from(el.attributes, (attr) => [attr.name, attr.value]);

    if (!directText.toLowerCase().includes(needle) &&
        !attributes.some(([, value]) => value.toLowerCase().includes(needle))) {
      continue;
    }

    const rect = el.getBoundingClientRect();
    candidates.push({
      candidate: nodes.length,
      tag_name: tagName,
      direct_text: directText,
      rect: {top: rect.top, left: rect.left, width: rect.width, height: rect.height},
      attributes,
    });
    nodes.push(el);
  }

  const store = (window.__pagequeryMatches = window.__pagequeryMatches || {});
  const token = Date.now().toString(36) + Math.random().toString(36).slice(2);
  store[token] = nodes;

  return {
    token,
    viewport: {width: window.innerWidth, height: window.innerHeight},
    candidates,
  };
}
"""

# Assigns or reuses refs for the picked candidates and releases the token.
# Yields null for any node that is no longer available.
SEARCH_TAG_JS = """
({token, picks, refAttribute}) => {
  const store = window.__pagequeryMatches || {};
  const nodes = store[token] || [];
  delete store[token];
  const stamp = Date.now();

  return picks.map(([candidate, index]) => {
    const el = nodes[candidate];
    if (!el) return null;
    if (!el.hasAttribute(refAttribute)) {
      el.setAttribute(refAttribute, 'search-' + index + '-' + stamp);
    }
    return el.getAttribute(refAttribute);
  });
}
"""
