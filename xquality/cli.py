"""Command line interface for xquality."""

import argparse
import json
import sys
from typing import List, Optional
import numpy as np

from .exceptions import XQualityError
from .metrics import QualityBlockSVD, QualityGMLOG
from .utils import load_config, load_image, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='GM-LOG and Block-SVD image quality assessment')
    parser.add_argument('--config', default=None, help='Path to configuration file')
    subparsers = parser.add_subparsers(dest='command', required=True)
    
    gmlog = subparsers.add_parser('gmlog', help='No-reference GM-LOG score (0 best, 100 worst)')
    gmlog.add_argument('image_path', help='Path to image')
    gmlog.add_argument('--model', required=True, help='Path to GM-LOG model file')
    gmlog.add_argument('--range', required=True, dest='range_path', help='Path to GM-LOG range file')
    
    features = subparsers.add_parser('features', help='Print GM-LOG feature vector')
    features.add_argument('image_path', help='Path to image')
    
    blocksvd = subparsers.add_parser('blocksvd', help='Block-SVD score of CMP against REF (1 best)')
    blocksvd.add_argument('ref_path', help='Path to reference image')
    blocksvd.add_argument('cmp_path', help='Path to comparison image')
    blocksvd.add_argument('--block-size', nargs=2, type=int, metavar=('W', 'H'),
                          help='Block width and height')
    blocksvd.add_argument('--map', dest='map_path', help='Save quality map to this .npy file')
    
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    logger = setup_logging(config.get('logging', {}))
    
    try:
        if args.command == 'gmlog':
            metric = QualityGMLOG.from_files(args.model, args.range_path, config)
            output = {'metric': metric.get_default_name(),
                      'score': list(metric.compute(load_image(args.image_path)))}
        elif args.command == 'features':
            features = QualityGMLOG.compute_features(load_image(args.image_path), config)
            output = {'features': features.tolist()}
        else:
            metric = QualityBlockSVD(block_size=args.block_size, config=config)
            scores, quality_map = metric.compute_map(load_image(args.ref_path),
                                                     load_image(args.cmp_path))
            output = {'metric': metric.get_default_name(),
                      'block_size': list(metric.block_size),
                      'score': list(scores)}
            if args.map_path:
                np.save(args.map_path, quality_map)
                output['map'] = args.map_path
    except (XQualityError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1
    
    print(json.dumps(output, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
