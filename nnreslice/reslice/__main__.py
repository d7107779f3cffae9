import os.path
import logging
import numpy as np
from argparse import ArgumentParser
from ..utils import expand_images
from ..io import VolumeWriter, VolumeReader
from ..space.grid import Grid
from ..space.transform import AffineTransform
from .oversample import make_oversampling_plan
from .object import ReslicerLike, ShapeResizer, VoxelResizer, \
    Upsampler, Downsampler

#                           --------------
#                           Common options
#                           --------------
# These options are common to all sub commands.
common = ArgumentParser(add_help=False)
common.add_argument('--images', '-i', nargs='+', required=True,
                    metavar='IMAGE', help='Input images')
common.add_argument('--transform', '-t', default=None, metavar='FILE',
                    help='Text file containing a 4x4 matrix that maps '
                         'output world coordinates to input world '
                         'coordinates [default: identity]')
common.add_argument('--oversample', nargs='+', type=int, default=None,
                    metavar='FACTOR',
                    help='Oversampling factors (1 to disable) '
                         '[default: auto]')
common.add_argument('--verbose', '-v', default=False, action='store_true',
                    help='Print progress information')

resampling = ArgumentParser(add_help=False)
resampling.add_argument('--order', default='1',
                        choices=['0', '1', '3', 'nearest', 'linear', 'cubic'],
                        help='Interpolation order [default: 1]')
resampling.add_argument('--fill', type=float, default=None,
                        dest='out_of_bounds', metavar='VALUE',
                        help='Value of voxels outside the input '
                             'field-of-view [default: NaN or 0]')
resampling.add_argument('--output-dtype', '-dt', default=None,
                        dest='output_dtype', metavar='TYPE',
                        help='Output data type [default: same as input]')
resampling.add_argument('--output-dir', '-o', default=None,
                        dest='output_dir', metavar='DIR',
                        help='Output directory [default: same as input]')
resampling.add_argument('--output-prefix', '-p', default=None,
                        dest='output_prefix', metavar='PREFIX',
                        help='Output prefix [default: resliced_]')
resampling.add_argument('--output-format', '-f', default=None,
                        dest='output_ext', metavar='FORMAT',
                        help='Output extension [default: same as input]')

#                           ------------
#                           Sub commands
#                           ------------
parser = ArgumentParser(prog='nnreslice.reslice')
sub = parser.add_subparsers(dest='command')
sub.required = True
# ---
# reference = reslice_like
# ---
ref = sub.add_parser('reference', parents=[common, resampling],
                     help='Reslice to reference space')
ref.add_argument('reference', metavar='REF', help='Reference volume')
ref.set_defaults(klass=ReslicerLike)
# ---
# upsample
# ---
up = sub.add_parser('upsample', parents=[common, resampling],
                    help='Upsample volume by a factor')
up.add_argument('factor', type=float, nargs='+', metavar='FACTOR',
                help='Upsampling factor')
up.set_defaults(klass=Upsampler)
# ---
# downsample
# ---
down = sub.add_parser('downsample', parents=[common, resampling],
                      help='Downsample volume by a factor')
down.add_argument('factor', type=float, nargs='+', metavar='FACTOR',
                  help='Downsampling factor')
down.set_defaults(klass=Downsampler)
# ---
# resize_shape
# ---
resize = sub.add_parser('resize_shape', parents=[common, resampling],
                        help='Resize a volume to match a target shape')
resize.add_argument('shape', type=int, nargs='+', metavar='SHAPE',
                    help='Output shape')
resize.set_defaults(klass=ShapeResizer)
# ---
# resize_voxel
# ---
rescale = sub.add_parser('resize_voxel', parents=[common, resampling],
                         help='Rescale a volume to match a target '
                              'voxel size')
rescale.add_argument('vs', type=float, nargs='+', metavar='VOXELSIZE',
                     help='Output voxel size')
rescale.set_defaults(klass=VoxelResizer)
# ---
# plan
# ---
plan = sub.add_parser('plan', parents=[common],
                      help='Print the oversampling factors used to reslice '
                           'to a reference space')
plan.add_argument('reference', metavar='REF', help='Reference volume')
plan.set_defaults(klass=None)

#                           -------------
#                           Parse options
#                           -------------

# Parse
args = parser.parse_args()

logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                    format='%(levelname)s:%(name)s: %(message)s')

transform = None
if args.transform is not None:
    transform = np.loadtxt(os.path.expanduser(args.transform))

oversample = args.oversample
if oversample is not None and len(oversample) == 1:
    oversample = oversample[0]

images = expand_images(args.images)

#                           -----------------
#                           Oversampling plan
#                           -----------------

if args.command == 'plan':
    reference = Grid.from_image(os.path.expanduser(args.reference))
    reader = VolumeReader()
    for i in images:
        grid = Grid.from_info(reader.inspect(i))
        mapping = grid.transform.solve(
            AffineTransform(transform) @ reference.transform)
        factors = make_oversampling_plan(mapping, oversample).factors
        print('{}: [ {} {} {} ]'.format(i, *factors))
    raise SystemExit(0)

# Output options
output_kwargs = {
    'dtype': args.output_dtype,
    'dir': args.output_dir,
    'prefix': args.output_prefix,
    'ext': args.output_ext,
}
if output_kwargs['dtype'] is not None:
    output_kwargs['dtype'] = np.dtype(output_kwargs['dtype'])
if output_kwargs['ext'] and not output_kwargs['ext'].startswith('.'):
    output_kwargs['ext'] = '.' + output_kwargs['ext']
if output_kwargs['prefix'] is None:
    output_kwargs['prefix'] = args.klass.output_prefix
writer = VolumeWriter(**output_kwargs)

#                           --------------
#                           Prepare object
#                           --------------

# Initialize appropriate reslicer
order = int(args.order) if args.order.isdigit() else args.order
common_kwargs = {
    'transform': transform,
    'order': order,
    'oversample': oversample,
    'out_of_bounds': args.out_of_bounds,
    'writer': writer,
}
if args.klass is ReslicerLike:
    reference = os.path.expanduser(args.reference)
    obj = args.klass(reference_volume=reference, **common_kwargs)
elif args.klass is Upsampler or args.klass is Downsampler:
    obj = args.klass(factor=args.factor, **common_kwargs)
elif args.klass is ShapeResizer:
    obj = args.klass(output_shape=args.shape, **common_kwargs)
elif args.klass is VoxelResizer:
    obj = args.klass(output_vs=args.vs, **common_kwargs)
else:
    raise NotImplementedError

#                           --------------
#                           Process images
#                           --------------

for i in images:
    obj(i)
