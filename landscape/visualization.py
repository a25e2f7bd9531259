import json
import logging
from pathlib import Path

import matplotlib.pyplot as plt
import networkx as nx
import plotly.express as px
import plotly.graph_objects as go

from landscape.config import NETWORK_LABELS, RANDOM_SEED
from landscape.thematic import BASIC, EMERGING, MOTOR, NICHE

logger = logging.getLogger(__name__)

QUADRANT_COLORS = {
    MOTOR: '#d62728',
    NICHE: '#9467bd',
    BASIC: '#1f77b4',
    EMERGING: '#7f7f7f',
}


def thematic_map_figure(table, medians, title="Thematic Map (Callon centrality x density)"):
    """Interactive scatter of clusters with median guide lines and quadrant labels."""
    fig = px.scatter(
        table,
        x='centrality',
        y='density',
        size='n_keywords',
        color='quadrant',
        color_discrete_map=QUADRANT_COLORS,
        text='label',
        hover_name='label',
        hover_data={'cluster': True, 'n_keywords': True, 'frequency': True, 'keywords': True},
        title=title,
        labels={'centrality': 'Centrality (external links)', 'density': 'Density (internal cohesion)'},
        size_max=40,
    )
    fig.update_traces(textposition='top center')

    med_c, med_d = medians['centrality'], medians['density']
    fig.add_vline(x=med_c, line_dash='dash', line_color='gray')
    fig.add_hline(y=med_d, line_dash='dash', line_color='gray')

    # Quadrant labels sit in the corners of the plotting area
    corners = [
        (MOTOR, 0.98, 0.98, 'right', 'top'),
        (NICHE, 0.02, 0.98, 'left', 'top'),
        (BASIC, 0.98, 0.02, 'right', 'bottom'),
        (EMERGING, 0.02, 0.02, 'left', 'bottom'),
    ]
    for name, x, y, xanchor, yanchor in corners:
        fig.add_annotation(
            x=x, y=y, xref='paper', yref='paper', text=name, showarrow=False,
            xanchor=xanchor, yanchor=yanchor,
            font=dict(size=14, color=QUADRANT_COLORS[name]), opacity=0.6,
        )

    fig.update_layout(width=900, height=700, template='plotly_white')
    return fig


def network_figure(G, title="Keyword Co-occurrence Network", n_labels=NETWORK_LABELS):
    """Static network drawing: size by log(1+frequency), colour by cluster."""
    pos = nx.spring_layout(G, k=1.5 / max(len(G) ** 0.5, 1), weight='weight', seed=RANDOM_SEED)

    sizes = [G.nodes[n].get('size', 0.0) for n in G.nodes]
    max_size = max(sizes) if sizes and max(sizes) > 0 else 1
    node_sizes = [60 + 900 * s / max_size for s in sizes]
    clusters = [G.nodes[n].get('cluster', 0) for n in G.nodes]

    weights = [w for _, _, w in G.edges(data='weight', default=1)]
    max_w = max(weights) if weights else 1
    widths = [0.3 + 3.0 * w / max_w for w in weights]

    by_frequency = sorted(G.nodes, key=lambda n: (-G.nodes[n].get('frequency', 0), n))
    labels = {n: n for n in by_frequency[:n_labels]}

    fig, ax = plt.subplots(figsize=(16, 12))
    nx.draw_networkx_edges(G, pos, ax=ax, width=widths, alpha=0.25, edge_color='#999999')
    nx.draw_networkx_nodes(G, pos, ax=ax, node_size=node_sizes, node_color=clusters,
                           cmap=plt.cm.tab10, alpha=0.85, edgecolors='white', linewidths=0.5)
    nx.draw_networkx_labels(G, pos, labels=labels, ax=ax, font_size=9)
    ax.set_title(title)
    ax.axis('off')
    fig.tight_layout()
    return fig


def sankey_figure(flow, title):
    fig = go.Figure(go.Sankey(
        node=dict(
            pad=15, thickness=18, line=dict(color='black', width=0.5),
            label=flow.nodes,
        ),
        link=dict(
            source=flow.links['source'].tolist(),
            target=flow.links['target'].tolist(),
            value=flow.links['value'].tolist(),
            label=flow.links['keyword'].tolist(),
        ),
    ))
    fig.update_layout(title_text=title, font_size=11, width=1100, height=750)
    return fig


def papers_per_year_figure(year_counts):
    fig = px.bar(year_counts, x='year', y='papers',
                 title="Papers per Year",
                 labels={'year': 'Year', 'papers': 'Papers'})
    fig.update_layout(xaxis_tickangle=-45, template='plotly_white')
    return fig


def trend_pca_figure(pca_df):
    """Years in the plane of the first two keyword-mix components, joined in time order."""
    plot_df = pca_df.reset_index()
    y_col = 'PC2' if 'PC2' in plot_df.columns else 'PC1'

    fig = px.scatter(
        plot_df, x='PC1', y=y_col, color='year',
        color_continuous_scale='Viridis', hover_name='year',
        title="Keyword Trends by Year (PCA)",
    )
    sorted_df = plot_df.sort_values('year')
    fig.add_trace(go.Scatter(
        x=sorted_df['PC1'], y=sorted_df[y_col], mode='lines',
        line=dict(color='rgba(0,0,0,0.2)', width=1), showlegend=False,
    ))
    fig.update_layout(width=900, height=700, template='plotly_white')
    return fig


def save_figure(fig, path):
    """Write plotly figures as self-contained HTML and matplotlib figures as PNG."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(fig, go.Figure):
        path = path.with_suffix('.html')
        fig.write_html(str(path), include_plotlyjs=True)
    else:
        path = path.with_suffix('.png')
        fig.savefig(str(path), dpi=200, bbox_inches='tight')
        plt.close(fig)
    logger.info("Saved %s", path)
    return path


def export_dashboard_json(figures, stats, path):
    """Bundle plotly figures and summary numbers into one JSON document."""
    output = {
        'plots': {name: fig.to_json() for name, fig in figures.items()},
        'stats': stats,
    }
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(output, f, indent=2, default=str)
    return path
