import json
from html import escape as html_escape

from tablediff.algorithms.changes import ChangeType, align_changes, count_changes
from tablediff.formatters.base import BaseFormatter, FormatterFactory, row_label


DEFAULT_STYLES = """
body { font-family: monospace; margin: 20px; background: #fafafa; color: #333; }
.diff-container { border: 1px solid #ddd; border-radius: 4px; overflow: hidden; }
.diff-header { background: #f7f7f7; padding: 10px 15px; border-bottom: 1px solid #ddd; font-weight: bold; }
table { width: 100%; border-collapse: collapse; font-size: 13px; }
td { padding: 2px 8px; vertical-align: top; white-space: pre-wrap; word-wrap: break-word; }
.row-num { width: 50px; text-align: right; color: #999; background: #f7f7f7; }
.marker { width: 20px; text-align: center; font-weight: bold; }
.content { width: 45%; }
.delete { background: #ffeef0; }
.insert { background: #e6ffed; }
.update { background: #fff8c5; }
.stats { padding: 10px 15px; background: #f7f7f7; border-top: 1px solid #ddd; font-size: 12px; }
.stats .inserts { color: #22863a; }
.stats .deletes { color: #cb2431; }
.stats .updates { color: #b08800; }
"""

MARKERS = {
    ChangeType.DELETE: "-",
    ChangeType.INSERT: "+",
    ChangeType.UPDATE: "~",
}


class HTMLFormatter(BaseFormatter):
    def _format_impl(self, changes, old, new, name1, name2):
        rows = []
        for row in align_changes(changes, len(old), len(new)):
            if row.kind is None and not self.config.show_unchanged:
                continue
            css = row.kind.value if row.kind else "equal"
            left = html_escape(row_label(old[row.old_index])) if row.old_index is not None else ""
            right = html_escape(row_label(new[row.new_index])) if row.new_index is not None else ""
            left_num = "" if row.old_index is None else row.old_index + 1
            right_num = "" if row.new_index is None else row.new_index + 1
            rows.append(f'<tr class="{css}"><td class="row-num">{left_num}</td><td class="content">{left}</td>'
                        f'<td class="marker">{MARKERS.get(row.kind, "")}</td>'
                        f'<td class="row-num">{right_num}</td><td class="content">{right}</td></tr>')
        counts = count_changes(changes)
        html = f"""<!DOCTYPE html>
<html><head><meta charset="{self.config.encoding}"><title>Changes: {html_escape(name1)} vs {html_escape(name2)}</title>
<style>{DEFAULT_STYLES}</style></head><body>
<div class="diff-container">
<div class="diff-header"><span>--- {html_escape(name1)}</span><br><span>+++ {html_escape(name2)}</span></div>
<table>{"".join(rows)}</table>
<div class="stats"><span class="inserts">+{counts['inserts']}</span>, <span class="deletes">-{counts['deletes']}</span>, <span class="updates">~{counts['updates']}</span></div>
</div></body></html>"""
        self._writeln(html)


class JSONFormatter(BaseFormatter):
    def _format_impl(self, changes, old, new, name1, name2):
        entries = []
        for change in changes:
            entry = {"type": change.kind.value, "index": change.index}
            if change.kind == ChangeType.MOVE:
                entry["to_index"] = change.to_index
            rows = new if change.kind == ChangeType.INSERT else old
            if 0 <= change.index < len(rows):
                entry["row"] = row_label(rows[change.index])
            entries.append(entry)
        result = {"old": name1, "new": name2, "changes": entries, "stats": count_changes(changes)}
        self._writeln(json.dumps(result, indent=2, ensure_ascii=False))


FormatterFactory.register("html", HTMLFormatter)
FormatterFactory.register("json", JSONFormatter)
