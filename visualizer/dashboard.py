"""Server-rendered chart page."""
from __future__ import annotations

from html import escape
from typing import Iterable

from visualizer.intervals import Interval
from visualizer.models import Instrument

CHART_LIBRARY_URL = "https://unpkg.com/lightweight-charts@4.1.3/dist/lightweight-charts.standalone.production.js"

_PAGE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title}</title>
  <style>
    body {{ font-family: Arial, sans-serif; margin: 2rem; color: #1f2937; }}
    h1 {{ margin-bottom: 1rem; }}
    .controls {{ display: flex; gap: 1rem; margin-bottom: 1rem; align-items: center; }}
    select {{ padding: 0.3rem; }}
    #chart {{ width: 100%; height: 520px; border: 1px solid #d1d5db; border-radius: 8px; }}
    #status {{ margin-top: 0.5rem; color: #4b5563; }}
    .bad {{ color: #b91c1c; }}
  </style>
  <script src="{chart_library_url}"></script>
</head>
<body>
  <h1>{title}</h1>
  <div class="controls">
    <label>Instrument
      <select id="instrument">{instrument_options}</select>
    </label>
    <label>Interval
      <select id="interval">{interval_options}</select>
    </label>
  </div>
  <div id="chart"></div>
  <div id="status">{status}</div>

  <script>
    const chart = LightweightCharts.createChart(document.getElementById('chart'), {{
      timeScale: {{ timeVisible: true, secondsVisible: false }},
    }});
    const series = chart.addCandlestickSeries();
    const statusEl = document.getElementById('status');

    async function load() {{
      const figi = document.getElementById('instrument').value;
      const interval = document.getElementById('interval').value;
      const params = new URLSearchParams({{ interval }});
      if (figi) params.set('figi', figi);

      try {{
        const res = await fetch('/api/candles?' + params.toString());
        const body = await res.json();
        if (!res.ok) {{
          statusEl.textContent = body.error || 'Failed to load candles';
          statusEl.classList.add('bad');
          return;
        }}
        statusEl.classList.remove('bad');
        series.setData(body.map(c => ({{
          time: Math.floor(c.timestamp / 1000),
          open: c.open, high: c.high, low: c.low, close: c.close,
        }})));
        chart.timeScale().fitContent();
        statusEl.textContent = body.length + ' candles';
      }} catch (err) {{
        statusEl.textContent = 'Failed to load candles';
        statusEl.classList.add('bad');
      }}
    }}

    document.getElementById('instrument').addEventListener('change', load);
    document.getElementById('interval').addEventListener('change', load);
    load();
  </script>
</body>
</html>
"""


def _option(value: str, label: str, selected: bool) -> str:
    marker = " selected" if selected else ""
    return f'<option value="{escape(value)}"{marker}>{escape(label)}</option>'


def render_chart_page(
    title: str,
    instruments: Iterable[Instrument],
    intervals: Iterable[Interval],
    default_figi: str,
    default_interval: str,
) -> str:
    """Render the chart page with instrument and interval selectors filled in."""
    instruments = list(instruments)
    instrument_options = "".join(
        _option(i.figi, f"{i.ticker} - {i.name}", i.figi == default_figi) for i in instruments
    )
    interval_options = "".join(
        _option(i.value, i.label, i.value == default_interval) for i in intervals
    )
    status = "" if instruments else "No instruments available"

    return _PAGE.format(
        title=escape(title),
        chart_library_url=CHART_LIBRARY_URL,
        instrument_options=instrument_options,
        interval_options=interval_options,
        status=escape(status),
    )
