"""
Modèles de l'application de labellisation.

- Interval : étendue entière n-dimensionnelle de la grille
- Labeling : labels ordonnés et masques booléens associés
- Holder / Notifier : publication des remplacements de valeur
- ViewStateModel : état de la vue (transformée, slice, timepoint, visibilité)
- BrushOverlayModel : état du curseur de pinceau
"""

from .brush_overlay_model import BrushOverlayModel
from .holder import Holder, Notifier
from .interval import Interval
from .labeling import Label, Labeling
from .overlay_data import OverlayData, PaintEvent
from .view_state_model import ViewStateModel

__all__ = [
    'BrushOverlayModel',
    'Holder',
    'Interval',
    'Label',
    'Labeling',
    'Notifier',
    'OverlayData',
    'PaintEvent',
    'ViewStateModel',
]
