"""Styled HTML report format."""

from datetime import datetime

from jinja2 import Environment, BaseLoader

from verifyforge.models.result import TestResult
from verifyforge.reporting.base import ExportedReport, dump_result, generated_line
from verifyforge.reporting.config import ReportConfig

STATUS_COLORS = {
    "pass": "#10b981",
    "warning": "#f59e0b",
    "fail": "#ef4444",
}

TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ config.title }}</title>
  <style>
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
           max-width: 1200px; margin: 0 auto; padding: 40px 20px; background: #f9fafb; }
    .header { text-align: center; margin-bottom: 40px; }
    h1 { color: #111827; font-size: 32px; margin-bottom: 10px; }
    .company { color: #6b7280; font-size: 14px; }
    .summary, .details { background: white; border-radius: 12px; padding: 30px;
                         box-shadow: 0 1px 3px rgba(0,0,0,0.1); margin-bottom: 30px; }
    .status { display: inline-block; padding: 8px 16px; border-radius: 20px; font-weight: 600;
              text-transform: uppercase; background: {{ color }}; color: white; }
    .score { font-size: 48px; font-weight: bold; color: {{ color }}; margin: 20px 0; }
    .metrics { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; }
    .metric { background: #f9fafb; padding: 20px; border-radius: 8px; }
    .metric-label { color: #6b7280; font-size: 14px; margin-bottom: 5px; }
    .metric-value { color: #111827; font-size: 24px; font-weight: bold; }
    pre { background: #f3f4f6; padding: 20px; border-radius: 8px; overflow-x: auto; font-size: 12px; }
    .footer { text-align: center; margin-top: 40px; color: #6b7280; font-size: 14px; }
  </style>
</head>
<body>
  <div class="header">
    {% if config.logo %}<img src="{{ config.logo }}" alt="logo" height="48">{% endif %}
    <h1>{{ config.title }}</h1>
    {% if config.attribution %}<p class="company">{{ config.attribution }}</p>{% endif %}
  </div>

  <div class="summary">
    <span class="status">{{ result.overall }}</span>
    <div class="score">{{ result.score }}/100</div>
    <div class="metrics">
      <div class="metric"><div class="metric-label">Total Tests</div>
        <div class="metric-value">{{ result.summary.total }}</div></div>
      <div class="metric"><div class="metric-label">Passed</div>
        <div class="metric-value" style="color: #10b981">{{ result.summary.passed }}</div></div>
      <div class="metric"><div class="metric-label">Failed</div>
        <div class="metric-value" style="color: #ef4444">{{ result.summary.failed }}</div></div>
      <div class="metric"><div class="metric-label">Warnings</div>
        <div class="metric-value" style="color: #f59e0b">{{ result.summary.warnings }}</div></div>
    </div>
  </div>

  <div class="details">
    <h2>Detailed Results</h2>
    <pre>{{ details }}</pre>
  </div>

  <div class="footer">{{ generated }} by VerifyForge AI</div>
</body>
</html>
"""

_env = Environment(loader=BaseLoader(), autoescape=True)
_template = _env.from_string(TEMPLATE)


def export_html(
    result: TestResult, config: ReportConfig, now: datetime
) -> ExportedReport:
    """Self-contained styled HTML page. User-supplied text is escaped."""
    rendered = _template.render(
        config=config,
        result=result,
        color=STATUS_COLORS[result.overall],
        details=dump_result(result),
        generated=generated_line(now),
    )
    return ExportedReport(
        content=rendered.encode(),
        media_type="text/html",
        extension="html",
    )
