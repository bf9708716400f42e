"""Plotting fuzzy variables, aggregated output profiles and model comparisons.
"""

import numpy as np
import matplotlib.pyplot as plt

FAVE_COLOR = "#4B0082"
SET_COLORS = ["#1b9e77", "#d95f02", "#7570b3", "#e7298a", "#66a61e"]


def style_axes(ax):
    """Apply common styling to the axes."""
    ax.spines['top'].set_color('#D3D3D3')  # light grey
    ax.spines['right'].set_color('#D3D3D3')
    ax.spines['bottom'].set_linewidth(0.8)
    ax.spines['left'].set_linewidth(0.8)
    return ax


def plot_mf(ax, x, y, label=None, line_color=FAVE_COLOR, plot_fill=False,
            linestyle='-'):
    """Plot a membership function on a given axis.

    Args:
        ax (matplotlib.axes.Axes): The axis to plot the membership function on.
        x (np.ndarray): The universe of discourse (x-axis).
        y (np.ndarray): The membership function values (y-axis).
        label (str): The label for the membership function.
        line_color (str): The color of the line.
        plot_fill (bool): Whether to fill under the curve.
        linestyle (str): The line style to use (see matplotlib)

    Returns:
        ax (matplotlib.axes.Axes): The axis with the membership function plotted.
    """
    style_axes(ax)
    y = np.atleast_1d(y)

    # A single non-zero sample is a singleton: draw a marker, not a line
    if np.count_nonzero(y) == 1:
        idx = np.atleast_1d(np.nonzero(y))[0]
        ax.axvline(x=x[idx], color=line_color, linestyle='--', alpha=0.6)
        ax.set_xlim(x[0], x[-1])
        ax.plot(x[idx], y[idx], 'o', color=line_color, markersize=10,
                zorder=10, label=label or 'Singleton')
    else:
        ax.plot(x, y, color=line_color, linewidth=2, label=label,
                linestyle=linestyle)
        if plot_fill:
            ax.fill_between(x, 0, y, alpha=0.3, color=line_color, hatch='//')
    ax.set_ylim(-0.01, 1.01)
    if label is not None:
        ax.legend()
    return ax


def plot_variable(variable, ax=None, resolution=100, line_colors=None,
                  plot_fill=False, save_path=None):
    """Plot every set of a FuzzyVariable on one axis.

    Args:
        variable (FuzzyVariable): The variable with sets to plot.
        ax (matplotlib.axes.Axes, optional): Axis to draw on. A new figure is
            made if None.
        resolution (int): Number of steps over the domain.
        line_colors (dict, optional): {set name: color}.
        plot_fill (bool): Whether to fill under the curves.
        save_path (str, optional): Save and close the figure here.

    Returns:
        fig, ax: Matplotlib figure and axis objects.
    """
    if ax is None:
        fig, ax = plt.subplots(1, figsize=(8, 5))
    else:
        fig = ax.figure

    x = variable.universe(resolution)
    for n, s in enumerate(variable.sets):
        if line_colors is not None:
            color = line_colors.get(s.name, FAVE_COLOR)
        else:
            color = SET_COLORS[n % len(SET_COLORS)]
        plot_mf(ax, x, s.sample(x), label=s.name.replace("_", " "),
                line_color=color, plot_fill=plot_fill)

    ax.set_title(variable.name.replace("_", " ").capitalize())
    ax.set_xlabel(variable.name)
    ax.set_ylabel('Degree of membership μ')
    if save_path:
        fig.savefig(save_path, bbox_inches='tight')
        plt.close(fig)
    return fig, ax


def plot_inference_result(result, output_variable, save_path=None):
    """Plot the output sets, the aggregated profile and the crisp output.

    Args:
        result (InferenceResult): Result of FIS.infer.
        output_variable (FuzzyVariable): The variable inferred.
        save_path (str, optional): Save and close the figure here.

    Returns:
        fig, ax: Matplotlib figure and axis objects.
    """
    fig, ax = plt.subplots(1, figsize=(8, 5))
    x = result.universe
    for s in output_variable.sets:
        plot_mf(ax, x, s.sample(x), label=s.name.replace("_", " "),
                line_color='grey', linestyle=':')

    plot_mf(ax, x, result.aggregated, label="Aggregated",
            line_color=FAVE_COLOR, plot_fill=True)
    ax.axvline(x=result.crisp_output, color='black', linestyle='--',
               alpha=0.8, label=f"Crisp output {result.crisp_output:.2f}")
    ax.set_xlabel(output_variable.name)
    ax.set_ylabel('Degree of membership μ')
    ax.legend(fontsize=8)
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, bbox_inches='tight')
        plt.close(fig)
    return fig, ax


def plot_model_comparison(averages, metrics=("precision", "recall", "f1",
                                             "filter_accuracy"),
                          save_path=None):
    """Grouped bars of per-model average metrics.

    Args:
        averages (pd.DataFrame): Indexed by model, as from
            verif.comparison.build_comparison_report.
        metrics (tuple): Columns to plot.
        save_path (str, optional): Save and close the figure here.

    Returns:
        fig, ax: Matplotlib figure and axis objects.
    """
    fig, ax = plt.subplots(1, figsize=(8, 5))
    style_axes(ax)
    metrics = list(metrics)
    x = np.arange(len(metrics))
    width = 0.8 / max(len(averages.index), 1)
    for n, model in enumerate(averages.index):
        ax.bar(x + n * width, averages.loc[model, metrics].to_numpy(),
               width, label=model, color=SET_COLORS[n % len(SET_COLORS)])
    ax.set_xticks(x + width * (len(averages.index) - 1) / 2)
    ax.set_xticklabels([m.replace("_", " ") for m in metrics])
    ax.set_ylim(0, 1.05)
    ax.legend()
    if save_path:
        fig.savefig(save_path, bbox_inches='tight')
        plt.close(fig)
    return fig, ax
