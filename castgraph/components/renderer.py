import html
import re

from ..tools.json_utils import to_script_json
from ..tools.string_utils import write_text_file

VIS_NETWORK_URL = "https://unpkg.com/vis-network/standalone/umd/vis-network.min.js"
PLACEHOLDER_PAT = re.compile(r"\[\[([A-Z_]+)\]\]")

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="UTF-8">
    <title>[[TITLE]]</title>
    <style type="text/css">
      html, body {
        margin: 0;
        width: 100vw;
        height: 100vh;
      }
      #network {
        width: 100vw;
        height: 100vh;
      }
    </style>
  </head>
  <body>
    <div id="network"></div>

    <script type="text/javascript" src="[[VIS_NETWORK_URL]]"></script>
    <script type="module">
      const nodes = new vis.DataSet([[NODES]]);
      const edges = new vis.DataSet([[EDGES]]);
      const container = document.getElementById('network');
      new vis.Network(container, { nodes, edges }, {});
    </script>
  </body>
</html>
"""


def render_html(graph, title):
    """Returns a standalone page drawing the graph with vis-network."""
    values = {
        "TITLE": html.escape(title),
        "VIS_NETWORK_URL": VIS_NETWORK_URL,
        "NODES": to_script_json(graph.nodes),
        "EDGES": to_script_json(graph.edges),
    }
    # Single pass so placeholder text inside names is left alone
    return PLACEHOLDER_PAT.sub(lambda m: values[m.group(1)], PAGE_TEMPLATE)


def write_html(graph, output_path, title):
    write_text_file(render_html(graph, title), output_path)
