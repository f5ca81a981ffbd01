"""Pure HTML rendering of the three screens and the tabbed shell."""
from html import escape
from typing import Optional

from app.ui.state import (
    EstimatorState,
    Notification,
    ParametersState,
    ProjectsState,
)

TABS = (
    ("calculator", "Calculator"),
    ("projects", "Projects"),
    ("settings", "Settings"),
)

STYLE = """
body { font-family: Inter, system-ui, -apple-system, 'Segoe UI', Roboto, 'Helvetica Neue', Arial; background:#f3f4f6; margin:0; }
header { background:white; border-bottom:1px solid #e5e7eb; padding:20px 24px; }
header h1 { margin:0; font-size:26px; }
header p { margin:4px 0 0; color:#6b7280; }
.container { max-width:1100px; margin:0 auto; padding:24px; }
.tabs { display:flex; gap:8px; margin-bottom:20px; }
.tabs a { flex:1; text-align:center; padding:10px; background:#e5e7eb; border-radius:6px; color:#111827; text-decoration:none; }
.tabs a.active { background:white; font-weight:600; box-shadow:0 1px 3px rgba(0,0,0,0.06); }
.card { background:white; padding:20px; border-radius:8px; box-shadow:0 1px 3px rgba(0,0,0,0.06); margin-bottom:16px; }
.grid { display:grid; grid-template-columns:repeat(auto-fill, minmax(260px, 1fr)); gap:16px; }
label { display:block; font-size:13px; color:#374151; margin-bottom:4px; }
input, select { width:100%; padding:8px; border:1px solid #d1d5db; border-radius:6px; box-sizing:border-box; }
button { padding:10px 16px; border:0; border-radius:6px; background:#2563eb; color:white; cursor:pointer; }
button.secondary { background:white; color:#2563eb; border:1px solid #2563eb; }
button.danger { background:#dc2626; }
button:disabled { opacity:0.5; cursor:wait; }
.hint { font-size:12px; color:#6b7280; }
.value { font-size:28px; font-weight:700; margin-top:6px; }
.toast { padding:12px 16px; border-radius:6px; margin-bottom:16px; }
.toast.success { background:#dcfce7; color:#166534; }
.toast.error { background:#fee2e2; color:#991b1b; }
.badge { display:inline-block; font-size:12px; padding:2px 8px; border-radius:999px; background:#e5e7eb; margin-right:4px; }
.cover { width:100%; height:128px; object-fit:cover; border-radius:6px; background:#f3f4f6; }
.empty { text-align:center; color:#6b7280; padding:48px 0; }
"""

# Disables every button of a form once it is submitted; the clicked button's
# name/value is copied into a hidden input first so it still reaches the server.
SUBMIT_ONCE_SCRIPT = """
document.querySelectorAll('form[data-submit-once]').forEach(function (form) {
  form.addEventListener('submit', function (event) {
    var b = event.submitter;
    if (b && b.name) {
      var h = document.createElement('input');
      h.type = 'hidden'; h.name = b.name; h.value = b.value;
      form.appendChild(h);
    }
    form.querySelectorAll('button').forEach(function (x) { x.disabled = true; });
  });
});
"""


def _money(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"${value:,.2f}"


def _text(value) -> str:
    return escape("" if value is None else str(value))


def _number(value) -> str:
    # empty field rather than a zero the user has to delete
    return "" if not value else _text(value)


def render_notification(notification: Optional[Notification]) -> str:
    if notification is None:
        return ""
    return f'<div class="toast {escape(notification.level)}" role="status">{escape(notification.message)}</div>'


def render_shell(active_tab: str, body: str) -> str:
    tabs = "".join(
        '<a href="/screens/%s" class="%s">%s</a>' % (key, "active" if key == active_tab else "", label)
        for key, label in TABS
    )
    return f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>University Press · Cost Estimator</title>
  <style>{STYLE}</style>
</head>
<body>
  <header>
    <h1>University Press</h1>
    <p>Printing cost estimation</p>
  </header>
  <div class="container">
    <nav class="tabs">{tabs}</nav>
    {body}
  </div>
  <script>{SUBMIT_ONCE_SCRIPT}</script>
</body>
</html>
"""


def _options(items, selected_id, label) -> str:
    opts = ['<option value="">Select…</option>']
    for item in items:
        sel = " selected" if item.id == selected_id else ""
        opts.append(f'<option value="{item.id}"{sel}>{_text(item.name)} - {label(item)}</option>')
    return "".join(opts)


def render_estimator(state: EstimatorState) -> str:
    d = state.draft
    paper_opts = _options(state.paper_types, d.paper_type_id, lambda p: f"{_money(p.cost_per_sheet)}/sheet")
    cover_opts = _options(state.cover_types, d.cover_type_id, lambda c: f"+{_money(c.additional_cost)}")

    results = ""
    if state.estimate is not None:
        e = state.estimate
        results = f"""
    <div class="card" id="results">
      <h3>Calculation results</h3>
      <div class="grid">
        <div><div class="hint">Estimated total cost</div><div class="value">{_money(e.total_cost)}</div>
          <div class="hint">{_money(e.cost_per_copy)} per copy</div></div>
        <div><div class="hint">Suggested sale price</div><div class="value">{_money(e.suggested_price)}</div>
          <div class="hint">{_money(e.price_per_copy)} per copy</div></div>
      </div>
      <p class="hint">Base {_money(e.base_cost)} · paper {_money(e.paper_cost_total)} · cover {_money(e.cover_cost_total)}
        · depreciation {_money(e.depreciation)} · energy {_money(e.energy_cost)} · royalty {_money(e.royalty_cost)}
        · admin {_money(e.admin_cost)}</p>
    </div>"""

    return f"""
{render_notification(state.notification)}
<form class="card" method="post" action="/screens/calculator" enctype="multipart/form-data" data-submit-once>
  <h2>Book cost calculator</h2>
  <div class="grid">
    <div><label for="title">Title *</label><input id="title" name="title" value="{_text(d.title)}" /></div>
    <div><label for="author">Author</label><input id="author" name="author" value="{_text(d.author)}" /></div>
    <div><label for="isbn">ISBN</label><input id="isbn" name="isbn" value="{_text(d.isbn)}" /></div>
    <div><label for="page_count">Number of pages *</label>
      <input id="page_count" name="page_count" type="number" min="0" value="{_number(d.page_count)}" /></div>
    <div><label for="print_run">Print run (copies) *</label>
      <input id="print_run" name="print_run" type="number" min="0" value="{_number(d.print_run)}" /></div>
    <div><label for="paper_type_id">Paper type</label><select id="paper_type_id" name="paper_type_id">{paper_opts}</select></div>
    <div><label for="cover_type_id">Cover type</label><select id="cover_type_id" name="cover_type_id">{cover_opts}</select></div>
    <div><label for="cover">Cover image</label><input id="cover" name="cover" type="file" accept="image/*" /></div>
  </div>
  <p>
    <button type="submit" name="action" value="calculate">Calculate cost</button>
    <button type="submit" name="action" value="save" class="secondary">Save project</button>
  </p>
  <p class="hint">Saving needs a title, the page count, the print run and both materials; totals are recalculated on save.</p>
</form>
{results}
"""


def render_parameters(state: ParametersState) -> str:
    if state.values is None:
        return f"""
{render_notification(state.notification)}
<div class="card empty">
  <h3>Could not load the parameters</h3>
  <p>The cost configuration parameters are not available.</p>
</div>
"""
    v = state.values
    updated = f'<p class="hint">Last updated {_text(v.updated_at)}</p>' if v.updated_at else ""
    return f"""
{render_notification(state.notification)}
<form class="card" method="post" action="/screens/settings" data-submit-once>
  <h2>Cost parameters</h2>
  <input type="hidden" name="id" value="{v.id}" />
  <div class="grid">
    <div><label for="equipment_depreciation_pct">Equipment depreciation (%)</label>
      <input id="equipment_depreciation_pct" name="equipment_depreciation_pct" type="number" step="0.01" value="{_text(v.equipment_depreciation_pct)}" />
      <p class="hint">Percentage applied on the base cost</p></div>
    <div><label for="energy_cost_per_kwh">Energy cost ($/kWh)</label>
      <input id="energy_cost_per_kwh" name="energy_cost_per_kwh" type="number" step="0.01" value="{_text(v.energy_cost_per_kwh)}" />
      <p class="hint">Price of one kilowatt-hour of electricity</p></div>
    <div><label for="author_royalty_pct">Author royalties (%)</label>
      <input id="author_royalty_pct" name="author_royalty_pct" type="number" step="0.01" value="{_text(v.author_royalty_pct)}" />
      <p class="hint">Percentage applied on the base cost</p></div>
    <div><label for="admin_overhead_pct">Administrative costs (%)</label>
      <input id="admin_overhead_pct" name="admin_overhead_pct" type="number" step="0.01" value="{_text(v.admin_overhead_pct)}" />
      <p class="hint">Percentage applied on the base cost</p></div>
  </div>
  <h4>How the estimate is calculated</h4>
  <ul class="hint">
    <li>The base cost covers paper and cover</li>
    <li>Depreciation, royalties and administrative costs are percentages of the base cost</li>
    <li>Energy is estimated at 0.5 kWh per copy</li>
    <li>The suggested sale price includes a 40% margin</li>
  </ul>
  {updated}
  <button type="submit">Save configuration</button>
</form>
"""


def _project_card(project, confirming: bool) -> str:
    author = f'<p class="hint">by {_text(project.author)}</p>' if project.author else ""
    cover = (
        f'<img class="cover" src="{_text(project.cover_image_url)}" alt="Cover of {_text(project.title)}" />'
        if project.cover_image_url else ""
    )
    badges = "".join(
        f'<span class="badge">{_text(name)}</span>'
        for name in (project.paper_type_name, project.cover_type_name) if name
    )
    isbn = f'<p class="hint">ISBN: {_text(project.isbn)}</p>' if project.isbn else ""
    if confirming:
        action = f"""
    <form method="post" action="/screens/projects/{project.id}/delete" data-submit-once>
      <p>Are you sure you want to delete this project?</p>
      <input type="hidden" name="confirm" value="yes" />
      <button type="submit" class="danger">Delete</button>
      <a href="/screens/projects">Cancel</a>
    </form>"""
    else:
        action = f"""
    <form method="post" action="/screens/projects/{project.id}/delete" data-submit-once>
      <button type="submit" class="secondary">Delete</button>
    </form>"""
    return f"""
  <div class="card" id="project-{project.id}">
    <h3>{_text(project.title)}</h3>
    {author}
    {cover}
    <p>Pages: {project.page_count} · Print run: {project.print_run}</p>
    <p>{badges}</p>
    <p>Total cost: <strong>{_money(project.estimated_cost)}</strong><br/>
       Suggested price: <strong>{_money(project.suggested_price)}</strong><br/>
       <span class="hint">Per copy: {_money(project.price_per_copy)}</span></p>
    <p class="hint">{project.created_at.strftime('%Y-%m-%d')}</p>
    {isbn}
    {action}
  </div>"""


def render_projects(state: ProjectsState) -> str:
    notice = render_notification(state.notification)
    if not state.projects:
        return f"""
{notice}
<div class="card empty">
  <h3>No projects</h3>
  <p>You have not saved any project yet. Create your first cost calculation!</p>
</div>
"""
    cards = "".join(_project_card(p, p.id == state.pending_delete) for p in state.projects)
    return f"""
{notice}
<h2>Saved projects</h2>
<div class="grid">{cards}</div>
"""
