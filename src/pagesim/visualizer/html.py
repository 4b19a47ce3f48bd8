"""
HTML-based visualizer using Jinja2 templates.

This module generates a standalone HTML report for a paging run. The
report includes:
- Status badges for mode, policy and frame usage
- Job, Page Map and Memory Map tables
- Address resolution results
- Event timeline (events mode) and reported errors
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from datetime import datetime

from jinja2 import Template

from pagesim.visualizer.base import BaseVisualizer
from pagesim.simulator.runner import RunResult
from pagesim.io.parser import ScenarioConfig


# HTML template for the report
HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Paging Simulation: {{ scenario_name }}</title>
    <style>
        :root {
            --bg-primary: #1a1a2e;
            --bg-secondary: #16213e;
            --bg-tertiary: #0f3460;
            --accent-blue: #4da8da;
            --accent-green: #00d26a;
            --accent-red: #ff6b6b;
            --accent-yellow: #ffd93d;
            --accent-magenta: #c792ea;
            --text-primary: #e8e8e8;
            --text-secondary: #a0a0a0;
        }

        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }

        body {
            font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
            background: linear-gradient(135deg, var(--bg-primary) 0%, var(--bg-secondary) 100%);
            color: var(--text-primary);
            min-height: 100vh;
            padding: 2rem;
        }

        .container {
            max-width: 1400px;
            margin: 0 auto;
        }

        .header {
            text-align: center;
            margin-bottom: 2rem;
            padding: 2rem;
            background: var(--bg-secondary);
            border-radius: 16px;
            border: 1px solid var(--bg-tertiary);
        }

        .header h1 {
            font-size: 2.2rem;
            color: var(--accent-blue);
            margin-bottom: 0.5rem;
        }

        .badge {
            display: inline-block;
            padding: 0.4rem 1.2rem;
            border-radius: 25px;
            font-weight: bold;
            margin: 1rem 0.3rem 0;
            border: 2px solid var(--accent-blue);
        }

        .grid {
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(500px, 1fr));
            gap: 1.5rem;
            margin-bottom: 2rem;
        }

        .card {
            background: var(--bg-secondary);
            border-radius: 12px;
            padding: 1.5rem;
            border: 1px solid var(--bg-tertiary);
            margin-bottom: 1.5rem;
        }

        .card h2 {
            color: var(--accent-blue);
            font-size: 1.3rem;
            margin-bottom: 1rem;
            padding-bottom: 0.5rem;
            border-bottom: 1px solid var(--bg-tertiary);
        }

        table {
            width: 100%;
            border-collapse: collapse;
            font-family: 'Consolas', 'Monaco', monospace;
            font-size: 0.9rem;
        }

        th, td {
            padding: 0.5rem;
            text-align: left;
            border-bottom: 1px solid rgba(255,255,255,0.1);
        }

        th {
            color: var(--text-secondary);
        }

        .free { color: var(--accent-green); }
        .occupied { color: var(--accent-red); }
        .hit { color: var(--accent-green); }
        .fault { color: var(--accent-yellow); }
        .error { color: var(--accent-red); }
        .muted { color: var(--text-secondary); }

        .timestamp {
            text-align: center;
            color: var(--text-secondary);
            font-size: 0.85rem;
        }
    </style>
</head>
<body>
    <div class="container">
        <header class="header">
            <h1>Paged Memory Allocation</h1>
            <p class="muted">{{ scenario_name }}{% if description %} - {{ description }}{% endif %}</p>
            {% for label, value in status %}
            <span class="badge">{{ label }}: {{ value }}</span>
            {% endfor %}
        </header>

        {% if allocations %}
        <div class="card">
            <h2>Static Allocation</h2>
            <table>
                <thead><tr><th>Job ID</th><th>Result</th><th>Frames</th></tr></thead>
                <tbody>
                    {% for a in allocations %}
                    <tr>
                        <td>{{ a.job_id }}</td>
                        <td class="{{ 'hit' if a.success else 'error' }}">{{ 'Allocated' if a.success else 'Not enough frames' }}</td>
                        <td>{{ a.frames|join(', ') if a.frames else '-' }}</td>
                    </tr>
                    {% endfor %}
                </tbody>
            </table>
        </div>
        {% endif %}

        {% if timeline %}
        <div class="card">
            <h2>Event Timeline ({{ 'timed out' if timed_out else 'finished' }} at t={{ final_time }})</h2>
            <table>
                <thead><tr><th>t</th><th>Event</th><th>Job</th><th>Detail</th></tr></thead>
                <tbody>
                    {% for e in timeline %}
                    <tr>
                        <td>{{ e.time }}</td>
                        <td>{{ e.action }}</td>
                        <td>{{ e.job_id }}</td>
                        <td>{{ e.detail }}</td>
                    </tr>
                    {% endfor %}
                </tbody>
            </table>
        </div>
        {% endif %}

        {% if accesses %}
        <div class="card">
            <h2>Address Resolution</h2>
            <table>
                <thead>
                    <tr>
                        <th>#</th><th>Job</th><th>Logical</th><th>Page</th>
                        <th>Offset</th><th>Frame</th><th>Physical</th><th>Result</th>
                    </tr>
                </thead>
                <tbody>
                    {% for a in accesses %}
                    <tr>
                        <td>{{ a.step }}</td>
                        <td>{{ a.job_id }}</td>
                        <td>{{ a.address }}</td>
                        {% if a.resolution %}
                        <td>{{ a.resolution.page_number }}</td>
                        <td>{{ a.resolution.offset }}</td>
                        <td>{{ a.resolution.frame_id }}</td>
                        <td>{{ a.resolution.physical_address }}</td>
                        {% if a.resolution.access %}
                        <td class="{{ 'hit' if a.resolution.access.result == 'HIT' else 'fault' }}">
                            {{ a.resolution.access.result }}{% if a.resolution.access.evicted_page_number is not none %}
                            (evicted J{{ a.resolution.access.evicted_job_id }}/P{{ a.resolution.access.evicted_page_number }}){% endif %}
                        </td>
                        {% else %}
                        <td>RESIDENT</td>
                        {% endif %}
                        {% else %}
                        <td>-</td><td>-</td><td>-</td><td>-</td>
                        <td class="error">{{ a.outcome.kind }}</td>
                        {% endif %}
                    </tr>
                    {% endfor %}
                </tbody>
            </table>
        </div>
        {% endif %}

        <div class="grid">
            <div class="card">
                <h2>Job Table</h2>
                <table>
                    <thead>
                        <tr><th>Job ID</th><th>Size</th><th>Pages</th><th>Loaded</th><th>Faults</th><th>Fragmentation</th></tr>
                    </thead>
                    <tbody>
                        {% for j in jobs %}
                        <tr>
                            <td>{{ j.job_id }}</td>
                            <td>{{ j.size }}</td>
                            <td>{{ j.page_count }}</td>
                            <td>{{ j.loaded_page_count }}</td>
                            <td>{{ j.fault_count }}</td>
                            <td>{{ j.internal_fragmentation }}</td>
                        </tr>
                        {% endfor %}
                    </tbody>
                </table>
            </div>

            <div class="card">
                <h2>Memory Map Table</h2>
                <table>
                    <thead>
                        <tr><th>Frame</th><th>Status</th><th>Job ID</th><th>Page</th><th>Access Time</th></tr>
                    </thead>
                    <tbody>
                        {% for f in frames %}
                        <tr>
                            <td>{{ f.frame_id }}</td>
                            {% if f.free %}
                            <td class="free">Free</td><td>-</td><td>-</td><td>-</td>
                            {% else %}
                            <td class="occupied">Occupied</td>
                            <td>{{ f.owner_job_id }}</td>
                            <td>{{ f.page_number }}</td>
                            <td>{{ f.last_access_time }}</td>
                            {% endif %}
                        </tr>
                        {% endfor %}
                    </tbody>
                </table>
            </div>
        </div>

        <div class="card">
            <h2>Page Map Table</h2>
            <table>
                <thead>
                    <tr><th>Job ID</th><th>Page</th><th>Frame</th><th>Status</th><th>R</th><th>M</th></tr>
                </thead>
                <tbody>
                    {% for p in pages %}
                    <tr>
                        <td>{{ p.job_id }}</td>
                        <td>{{ p.page_number }}</td>
                        <td>{{ p.frame_id if p.resident else '-' }}</td>
                        <td class="{{ 'free' if p.resident else 'muted' }}">{{ 'Loaded' if p.resident else 'Not Loaded' }}</td>
                        <td>{{ 1 if p.referenced else 0 }}</td>
                        <td>{{ 1 if p.modified else 0 }}</td>
                    </tr>
                    {% endfor %}
                </tbody>
            </table>
        </div>

        {% if outcomes %}
        <div class="card">
            <h2>Reported Errors</h2>
            <table>
                <thead><tr><th>Kind</th><th>Job</th><th>Message</th></tr></thead>
                <tbody>
                    {% for o in outcomes %}
                    <tr>
                        <td class="error">{{ o.kind }}</td>
                        <td>{{ o.job_id if o.job_id is not none else '-' }}</td>
                        <td>{{ o.message }}</td>
                    </tr>
                    {% endfor %}
                </tbody>
            </table>
        </div>
        {% endif %}

        <p class="timestamp">Generated: {{ timestamp }}</p>
    </div>
</body>
</html>
"""


class HTMLVisualizer(BaseVisualizer):
    """
    HTML visualizer for paging runs.

    Generates a standalone HTML file with the paging tables, suitable
    for viewing in a browser.
    """

    extension = ".html"

    def __init__(self, config: Optional[ScenarioConfig] = None):
        """
        Initialize the HTML visualizer.

        Args:
            config: Scenario configuration.
        """
        super().__init__(config)
        self.template = Template(HTML_TEMPLATE, autoescape=True)

    def visualize(self, result: RunResult) -> None:
        """
        Generate and print HTML to stdout.

        For HTML, this is less useful than save(), but provides
        the same interface as TerminalVisualizer.
        """
        print(self._render(result))

    def save(self, result: RunResult, output_path: Path) -> None:
        """
        Save HTML visualization to a file.

        Args:
            result: The run result.
            output_path: Path to save HTML file.
        """
        html = self._render(result)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(html)

    def _render(self, result: RunResult) -> str:
        """Render the HTML from template."""
        data = result.to_dict()
        simulation = data["simulation"] or {}

        context = {
            "scenario_name": self.scenario_name,
            "description": self.description,
            "status": self.status_items(result),
            "allocations": data["allocations"],
            "accesses": data["accesses"],
            "timeline": simulation.get("timeline", []),
            "timed_out": simulation.get("timed_out", False),
            "final_time": simulation.get("final_time", 0),
            "jobs": data["job_table"],
            "pages": data["page_map_table"],
            "frames": data["memory_map_table"],
            "outcomes": data["outcomes"],
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        }

        return self.template.render(**context)

    def render_to_string(self, result: RunResult) -> str:
        """
        Render HTML to string without saving.

        Args:
            result: The run result.

        Returns:
            HTML string.
        """
        return self._render(result)
