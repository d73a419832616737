"""Static HTML report with client-side filtering.

The page embeds the JSON artifact in a <script type="application/json">
block and renders the product grid in the browser, so the report works when
opened straight from disk or served from GitHub Pages.
"""

import html
import json
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List

import structlog

from kenyadeals.schemas.scrape import ProductCategory
from kenyadeals.scrapers.aggregator import DealsReport

logger = structlog.get_logger(__name__)


def _embed_json(data: Dict[str, Any]) -> str:
    """JSON that is safe inside a <script> element."""
    return (
        json.dumps(data, ensure_ascii=False)
        .replace("&", "\\u0026")
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
    )


def _format_kes(value: Decimal) -> str:
    return f"KES {_grouped(value)}"


def _shop_buttons(shops: List[str]) -> str:
    buttons = ['<button class="filter-btn active" data-group="shop" data-value="all">All Shops</button>']
    for shop in shops:
        label = html.escape(shop)
        buttons.append(
            f'<button class="filter-btn" data-group="shop" data-value="{label}">{label}</button>'
        )
    return "\n          ".join(buttons)


# Upper bounds of the lower price ranges; the last range always ends at the ceiling
PRICE_BREAKS = (Decimal("1000"), Decimal("5000"))


def _plain(value: Decimal) -> str:
    return format(value.normalize(), "f")


def _grouped(value: Decimal) -> str:
    return format(value.normalize(), ",f")


def _price_buttons(max_price: Decimal) -> str:
    """Price range buttons from 0 up to ``max_price``; empty ranges are left out."""
    edges = [Decimal("0")] + [b for b in PRICE_BREAKS if b < max_price] + [max_price]
    buttons = ['<button class="filter-btn active" data-group="price" data-value="all">All</button>']
    for low, high in zip(edges, edges[1:]):
        label = f"Under {_grouped(high)}" if low == 0 else f"{_grouped(low)} - {_grouped(high)}"
        buttons.append(
            f'<button class="filter-btn" data-group="price" '
            f'data-value="{_plain(low)}-{_plain(high)}">{label}</button>'
        )
    return "\n          ".join(buttons)


def render_html_report(report: DealsReport, max_price: Decimal) -> str:
    """Render the report page for ``report``.

    Args:
        report: Aggregated deals
        max_price: Ceiling used for the run (shown in the title and price filter)
    """
    generated = report.timestamp.strftime("%d %B %Y, %H:%M UTC")
    ceiling = _format_kes(max_price)

    replacements = {
        "__TITLE__": html.escape(f"Kenyan Electronics Deals Under {ceiling}"),
        "__CEILING__": html.escape(ceiling),
        "__TOTAL__": str(report.total_items),
        "__LAPTOPS__": str(report.count_by_category(ProductCategory.LAPTOP)),
        "__PHONES__": str(report.count_by_category(ProductCategory.PHONE)),
        "__GENERATED__": html.escape(generated),
        "__SHOP_BUTTONS__": _shop_buttons(report.shops()),
        "__PRICE_BUTTONS__": _price_buttons(max_price),
        "__DATA__": _embed_json(report.to_dict()),
    }
    page = _TEMPLATE
    for token, value in replacements.items():
        page = page.replace(token, value)
    return page


def write_html_report(report: DealsReport, max_price: Decimal, path: Path) -> Path:
    """Render and write the report, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_html_report(report, max_price), encoding="utf-8")
    logger.info("html_report_written", path=str(path), items=report.total_items)
    return path


_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>__TITLE__</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body { font-family: system-ui, -apple-system, "Segoe UI", sans-serif; background: #f3f6fb; color: #333; line-height: 1.5; }
    .container { max-width: 1400px; margin: 0 auto; padding: 20px; }
    header { text-align: center; padding: 28px 16px; margin-bottom: 24px; border-radius: 12px; color: #fff;
             background: linear-gradient(90deg, #ff6b6b, #ffa502); }
    header h1 { font-size: 2.2rem; }
    .summary, .controls { background: #fff; border-radius: 12px; padding: 20px; margin-bottom: 24px;
                          box-shadow: 0 6px 14px rgba(0,0,0,0.08); display: flex; flex-wrap: wrap; gap: 20px; }
    .summary-item { flex: 1; min-width: 160px; text-align: center; }
    .summary-value { font-size: 2.2rem; font-weight: 700; color: #4361ee; }
    .summary-label { color: #666; }
    .filter-group { flex: 1; min-width: 200px; }
    .filter-group h3 { color: #4361ee; font-size: 1rem; margin-bottom: 8px; }
    .filter-btn { padding: 6px 14px; margin: 4px 4px 4px 0; border: 2px solid #4361ee; border-radius: 20px;
                  background: #fff; color: #4361ee; font-weight: 600; cursor: pointer; }
    .filter-btn.active, .filter-btn:hover { background: #4361ee; color: #fff; }
    #search-input { width: 100%; padding: 8px 14px; border: 2px solid #4361ee; border-radius: 20px; }
    #clear-search { margin-top: 8px; padding: 6px 14px; border: none; border-radius: 20px; background: #ff6b6b; color: #fff; cursor: pointer; }
    .products { display: grid; grid-template-columns: repeat(auto-fill, minmax(300px, 1fr)); gap: 24px; }
    .product { background: #fff; border-radius: 12px; overflow: hidden; display: flex; flex-direction: column;
               box-shadow: 0 6px 14px rgba(0,0,0,0.08); }
    .product-image-container { height: 200px; display: flex; align-items: center; justify-content: center; background: #f8f9fa; }
    .product-image { max-width: 100%; max-height: 100%; object-fit: contain; }
    .no-image { color: #aaa; }
    .product-content { padding: 16px; display: flex; flex-direction: column; flex-grow: 1; }
    .category { align-self: flex-start; padding: 3px 12px; border-radius: 16px; font-size: 0.75rem; font-weight: 600;
                text-transform: uppercase; color: #fff; margin-bottom: 10px; }
    .category.laptop { background: #7209b7; }
    .category.phone { background: #4361ee; }
    .product h3 { font-size: 1.05rem; flex-grow: 1; margin-bottom: 10px; }
    .shop { color: #777; font-size: 0.9rem; margin-bottom: 10px; }
    .price { font-size: 1.3rem; font-weight: 700; color: #2b9348; margin-right: 8px; }
    .original-price { text-decoration: line-through; color: #999; margin-right: 8px; }
    .discount { background: #ff6b6b; color: #fff; border-radius: 10px; padding: 2px 8px; font-size: 0.8rem; }
    .url { margin-top: 12px; text-align: center; padding: 8px; border-radius: 20px; background: #4361ee; color: #fff; text-decoration: none; }
    .empty { grid-column: 1 / -1; text-align: center; color: #888; padding: 40px; }
  </style>
</head>
<body>
  <div class="container">
    <header>
      <h1>__TITLE__</h1>
      <p>Phones and laptops on sale at Kenyan online shops, up to __CEILING__</p>
    </header>

    <section class="summary">
      <div class="summary-item"><div class="summary-value" id="total-deals">__TOTAL__</div><div class="summary-label">Deals</div></div>
      <div class="summary-item"><div class="summary-value">__LAPTOPS__</div><div class="summary-label">Laptops</div></div>
      <div class="summary-item"><div class="summary-value">__PHONES__</div><div class="summary-label">Phones</div></div>
      <div class="summary-item"><div class="summary-label">Last updated</div><div>__GENERATED__</div></div>
    </section>

    <section class="controls">
      <div class="filter-group">
        <h3>Category</h3>
        <button class="filter-btn active" data-group="category" data-value="all">All</button>
        <button class="filter-btn" data-group="category" data-value="laptop">Laptops</button>
        <button class="filter-btn" data-group="category" data-value="phone">Phones</button>
      </div>
      <div class="filter-group">
        <h3>Price</h3>
          __PRICE_BUTTONS__
      </div>
      <div class="filter-group">
        <h3>Shop</h3>
          __SHOP_BUTTONS__
      </div>
      <div class="filter-group">
        <h3>Discount</h3>
        <button class="filter-btn active" data-group="discount" data-value="0">Any</button>
        <button class="filter-btn" data-group="discount" data-value="20">20%+</button>
        <button class="filter-btn" data-group="discount" data-value="30">30%+</button>
        <button class="filter-btn" data-group="discount" data-value="50">50%+</button>
      </div>
      <div class="filter-group">
        <h3>Search</h3>
        <input type="text" id="search-input" placeholder="Search name or shop">
        <button id="clear-search">Clear</button>
      </div>
    </section>

    <section class="products" id="products-container"></section>
  </div>

  <script type="application/json" id="deals-data">__DATA__</script>
  <script>
    (function () {
      var data = JSON.parse(document.getElementById("deals-data").textContent);
      var filters = { category: "all", price: "all", shop: "all", discount: "0", search: "" };

      function el(tag, cls, text) {
        var node = document.createElement(tag);
        if (cls) { node.className = cls; }
        if (text !== undefined) { node.textContent = text; }
        return node;
      }

      function kes(value) { return "KES " + Number(value).toLocaleString(); }

      function matches(item) {
        if (filters.category !== "all" && item.category !== filters.category) { return false; }
        if (filters.price !== "all") {
          var bounds = filters.price.split("-").map(Number);
          if (item.currentPrice < bounds[0] || item.currentPrice > bounds[1]) { return false; }
        }
        if (filters.shop !== "all" && item.shop !== filters.shop) { return false; }
        if ((parseInt(item.discount, 10) || 0) < Number(filters.discount)) { return false; }
        if (filters.search) {
          var haystack = (item.name + " " + item.shop).toLowerCase();
          if (haystack.indexOf(filters.search) === -1) { return false; }
        }
        return true;
      }

      function card(item) {
        var product = el("div", "product");
        var imageBox = el("div", "product-image-container");
        if (item.imageUrl) {
          var img = el("img", "product-image");
          img.src = item.imageUrl;
          img.alt = item.name;
          img.onerror = function () { imageBox.replaceChildren(el("div", "no-image", "No image available")); };
          imageBox.appendChild(img);
        } else {
          imageBox.appendChild(el("div", "no-image", "No image available"));
        }
        product.appendChild(imageBox);

        var content = el("div", "product-content");
        content.appendChild(el("div", "category " + item.category, item.category));
        content.appendChild(el("h3", null, item.name));
        content.appendChild(el("div", "shop", "Shop: " + item.shop));
        var prices = el("div", "price-container");
        prices.appendChild(el("span", "price", kes(item.currentPrice)));
        if (item.originalPrice > item.currentPrice) {
          prices.appendChild(el("span", "original-price", kes(item.originalPrice)));
        }
        if (item.discount) { prices.appendChild(el("span", "discount", item.discount + " off")); }
        content.appendChild(prices);
        if (item.url) {
          var link = el("a", "url", "View Deal");
          link.href = item.url;
          link.target = "_blank";
          link.rel = "noopener";
          content.appendChild(link);
        }
        product.appendChild(content);
        return product;
      }

      function render() {
        var container = document.getElementById("products-container");
        var shown = data.items.filter(matches);
        container.replaceChildren();
        if (!shown.length) {
          container.appendChild(el("div", "empty", "No deals match the current filters."));
        }
        shown.forEach(function (item) { container.appendChild(card(item)); });
        document.getElementById("total-deals").textContent = shown.length;
      }

      document.querySelectorAll(".filter-btn").forEach(function (button) {
        button.addEventListener("click", function () {
          var group = button.dataset.group;
          document.querySelectorAll('.filter-btn[data-group="' + group + '"]').forEach(function (b) {
            b.classList.remove("active");
          });
          button.classList.add("active");
          filters[group] = button.dataset.value;
          render();
        });
      });

      var search = document.getElementById("search-input");
      search.addEventListener("input", function () { filters.search = search.value.toLowerCase(); render(); });
      document.getElementById("clear-search").addEventListener("click", function () {
        search.value = "";
        filters.search = "";
        render();
      });

      render();
    })();
  </script>
</body>
</html>
"""
