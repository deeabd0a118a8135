"""
Plotting functions for synthetic locations, covariance matrices and variograms.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Optional, Tuple

from .exceptions import InvalidArgumentError
from .locations import Locations
from .variogram import Variogram


def _figure_and_axes(ax: Optional[plt.Axes], figsize: Tuple[int, int]):
    if ax is None:
        return plt.subplots(figsize=figsize)
    return ax.get_figure(), ax


def plot_locations(locations: Locations, show_order: bool = True,
                   ax: Optional[plt.Axes] = None,
                   figsize: Tuple[int, int] = (8, 8)) -> plt.Figure:
    """
    Scatter plot of the x/y coordinates of a location set.

    Parameters
    ----------
    locations : Locations
        Locations to draw
    show_order : bool, default=True
        Color points by storage order and connect them, which makes the
        Morton curve of a sorted set visible
    ax : plt.Axes, optional
        Axes to draw on; a new figure is created otherwise
    figsize : tuple, default=(8, 8)
        Figure size for a new figure

    Returns
    -------
    plt.Figure
        Matplotlib figure object
    """
    fig, ax = _figure_and_axes(ax, figsize)

    if show_order:
        ax.plot(locations.x, locations.y, '-', color='grey', linewidth=0.5, alpha=0.5)
        scatter = ax.scatter(locations.x, locations.y, c=np.arange(locations.size),
                             cmap='viridis', s=20)
        plt.colorbar(scatter, ax=ax, label='Storage Order')
    else:
        ax.scatter(locations.x, locations.y, s=20, alpha=0.7)

    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.set_title(f'{locations.size} Locations ({locations.dimension.value})')
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)

    return fig


def plot_covariance(matrix: np.ndarray, ax: Optional[plt.Axes] = None,
                    figsize: Tuple[int, int] = (8, 7),
                    title: str = 'Covariance Matrix') -> plt.Figure:
    """
    Heat map of a covariance matrix.

    Parameters
    ----------
    matrix : np.ndarray
        2-D matrix
    ax : plt.Axes, optional
        Axes to draw on
    figsize : tuple, default=(8, 7)
        Figure size for a new figure
    title : str, default='Covariance Matrix'
        Plot title

    Returns
    -------
    plt.Figure
        Matplotlib figure object
    """
    matrix = np.asarray(matrix)
    if matrix.ndim != 2:
        raise InvalidArgumentError(f"Expected a 2-D matrix, got shape {matrix.shape}")

    fig, ax = _figure_and_axes(ax, figsize)
    image = ax.imshow(matrix, cmap='viridis', interpolation='nearest')
    plt.colorbar(image, ax=ax, label='Covariance')
    ax.set_xlabel('Column')
    ax.set_ylabel('Row')
    ax.set_title(title)

    return fig


def plot_variogram(variogram_obj: Variogram, ax: Optional[plt.Axes] = None,
                   figsize: Tuple[int, int] = (10, 6),
                   model: Optional[Variogram] = None) -> plt.Figure:
    """
    Plot a variogram.

    Parameters
    ----------
    variogram_obj : Variogram
        Empirical or theoretical variogram
    ax : plt.Axes, optional
        Axes to draw on
    figsize : tuple, default=(10, 6)
        Figure size for a new figure
    model : Variogram, optional
        Kernel variogram drawn as a line over ``variogram_obj``

    Returns
    -------
    plt.Figure
        Matplotlib figure object
    """
    fig, ax = _figure_and_axes(ax, figsize)

    ax.plot(variogram_obj.distances, variogram_obj.gamma, 'bo-',
            label='Variogram', markersize=4)

    if model is not None:
        ax.plot(model.distances, model.gamma, 'r-', label='Kernel Model', linewidth=2)

    ax.set_xlabel('Distance')
    ax.set_ylabel('Semivariance')
    ax.set_title('Variogram')
    ax.grid(True, alpha=0.3)
    ax.legend()

    return fig
