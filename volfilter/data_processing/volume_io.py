"""
Reading and writing volumes as (OME-)TIFF files.
Files are read with their series axes and standardized to TZYXC.
"""

from pathlib import Path
from typing import Optional, Union
import logging

import numpy as np
import tifffile

from ..core.config import IOConfig
from ..core.utils import validate_file_path
from ..core.volume import Volume, STANDARD_AXES

logger = logging.getLogger(__name__)

# Axes written to OME-TIFF files
OME_AXES = 'TZCYX'


def _standardize_series_axes(axes: str, shape: tuple) -> str:
    """Map tifffile series axes to TZYXC letters.
    
    Samples ('S') are channels. A single generic axis ('I' image sequence or
    'Q' unknown) is taken as Z when the file has no Z axis. Other unknown
    axes must be singleton and are squeezed by the caller.
    """
    mapped = list(axes.upper().replace('S', 'C'))
    generic = [i for i, a in enumerate(mapped) if a in 'IQ' and shape[i] > 1]
    
    if generic:
        if len(generic) == 1 and 'Z' not in mapped:
            mapped[generic[0]] = 'Z'
            logger.info(f"Interpreting axis {axes[generic[0]]} (size {shape[generic[0]]}) as Z")
        else:
            raise ValueError(
                f"Cannot interpret TIFF axes '{axes}' with shape {shape}. "
                f"Pass the axis order explicitly."
            )
    return ''.join(mapped)


def load_volume(
    filepath: Union[str, Path],
    axes: Optional[str] = None,
    config: Optional[IOConfig] = None,
) -> Volume:
    """Load a TIFF file into a Volume.
    
    Args:
        filepath: Path to a .tif/.tiff file.
        axes: Axis order of the stored array (e.g. 'ZCYX'). If None, the axes
            recorded in the file are used.
        config: I/O configuration. If None, uses defaults.
        
    Returns:
        Volume: Volume named after the file stem.
        
    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If the axes cannot be mapped to TZYXC.
    """
    config = config or IOConfig()
    filepath = Path(filepath)
    validate_file_path(filepath, config.supported_formats)
    axes = axes or config.input_axes
    
    logger.info(f"Loading TIFF file: {filepath}")
    with tifffile.TiffFile(str(filepath)) as tif:
        series = tif.series[0]
        image = series.asarray()
        file_axes = series.axes
    
    if axes is None:
        axes = _standardize_series_axes(file_axes, image.shape)
        keep = [i for i, a in enumerate(axes) if a in STANDARD_AXES]
        dropped = [i for i in range(image.ndim) if i not in keep]
        if any(image.shape[i] != 1 for i in dropped):
            raise ValueError(f"Unsupported non-singleton axes in '{file_axes}' with shape {image.shape}")
        if dropped:
            image = np.squeeze(image, axis=tuple(dropped))
            axes = ''.join(axes[i] for i in keep)
    
    volume = Volume(image, axes=axes, name=filepath.name.split('.')[0],
                    metadata={'source': str(filepath), 'source_axes': file_axes})
    logger.info(f"Loaded {volume!r} from axes '{file_axes}'")
    return volume


def save_volume(
    volume: Volume,
    filepath: Union[str, Path],
    compression: Optional[str] = None,
) -> Path:
    """Save a Volume as OME-TIFF in TZCYX order.
    
    Args:
        volume: Volume to write.
        filepath: Output path.
        compression: tifffile compression name, or None.
        
    Returns:
        Path: The written file.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    
    # TZYXC -> TZCYX
    data = np.transpose(volume.data, (0, 1, 4, 2, 3))
    ome_metadata = {'axes': OME_AXES, 'Name': volume.name}
    
    logger.info(f"Saving {volume!r} to {filepath}")
    tifffile.imwrite(
        str(filepath),
        data,
        ome=True,
        photometric='minisblack',
        metadata=ome_metadata,
        compression=compression,
    )
    return filepath
