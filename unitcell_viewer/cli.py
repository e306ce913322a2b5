"""
Command-line entry point: config, startup summary, exports, interactive window.
"""

from typing import List, Optional
import argparse
import sys

from .config import Config, dump_config, guess_default_config, load_config
from .controller import ViewerController
from .lattice import STRUCTURE_ORDER, AtomInstance, StructureType


# ------------------ Startup summary ------------------
def print_startup_summary(config_path: Optional[str], cfg: Config, instances: List[AtomInstance],
                          export_dir: Optional[str], export_merged: Optional[str],
                          screenshot: Optional[str], no_show: bool):
    """
Print a human-readable summary of the current run.
    """

    st = cfg.structure_type
    counts = {}
    for inst in instances:
        counts[inst.label] = counts.get(inst.label, 0) + 1

    print("----- Unit Cell Viewer -----")
    print(f"config:        {config_path or '(built-in defaults)'}")
    print(f"structure:     {st.display_name} [{st.value}]")
    print(f"atoms:         {len(instances)} ({', '.join(f'{k}={v}' for k, v in counts.items())})")
    print(f"sphere res:    {cfg.sphere_theta} x {cfg.sphere_phi}")
    print(f"picking:       {'on' if cfg.enable_picking else 'off'}"
          f" ({'left' if cfg.left_clicking else 'right'} click)")
    print(f"export dir:    {export_dir or '-'}")
    print(f"export merged: {export_merged or '-'}")
    print(f"screenshot:    {screenshot or '-'}")
    print(f"no_show:       {no_show}")
    print("----------------------------")


def print_sites(instances: List[AtomInstance]):
    """One line per atom: index, label, color, radius, position."""
    print(f"{'#':>3}  {'label':<6} {'color':<10} {'radius':>6}   position")
    for i, inst in enumerate(instances):
        x, y, z = inst.position
        print(f"{i:>3}  {inst.label:<6} {inst.color:<10} {inst.radius:>6.2f}   ({x:.2f}, {y:.2f}, {z:.2f})")


# ------------------ CLI ------------------
def parse_args(argv: Optional[List[str]] = None):
    """
Define/parse command-line arguments for the viewer.
    """

    p = argparse.ArgumentParser(description="Crystal unit-cell viewer (Cu FCC, NaCl and MgO rock salt) with PyVista")
    p.add_argument("--config", type=str, default=None, help="Path to YAML/JSON config (optional)")
    p.add_argument("--structure", type=str, default=None,
                   help=f"Structure to show first: {', '.join(st.value for st in STRUCTURE_ORDER)}")
    p.add_argument("--dump-config", type=str, default=None, help="Write current config to file (YAML/JSON)")
    p.add_argument("--export-dir", type=str, default=None, help="Directory to save per-species meshes as .vtp")
    p.add_argument("--export-merged", type=str, default=None, help="Path to save merged mesh (.vtp/.ply/.obj/.stl)")
    p.add_argument("--screenshot", type=str, default=None, help="Path to save a screenshot (PNG)")
    p.add_argument("--no-show", action="store_true", help="Do not open an interactive window (batch/export)")
    p.add_argument("--list-sites", action="store_true", help="Print the atoms of the chosen structure")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
Entry point wiring: config, structure override, optional dump/export, then the window.
    """

    args = parse_args(argv)

    config_path = args.config or guess_default_config()
    try:
        cfg = load_config(config_path) if config_path else Config()
        if args.structure:
            cfg.structure = StructureType.parse(args.structure).value
    except (OSError, ValueError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2

    controller = ViewerController(cfg.structure_type)
    instances = controller.instances

    if args.dump_config:
        dump_config(cfg, args.dump_config)
        print(f"config written to {args.dump_config}")

    print_startup_summary(config_path, cfg, instances,
                          export_dir=args.export_dir,
                          export_merged=args.export_merged,
                          screenshot=args.screenshot,
                          no_show=args.no_show)
    if args.list_sites:
        print_sites(instances)

    # pyvista/VTK is only needed from here on
    from .render import LatticeViewer, export_all

    for path in export_all(instances, args.export_dir, args.export_merged,
                           cfg.sphere_theta, cfg.sphere_phi):
        print(f"[info] wrote {path}")

    if args.no_show and not args.screenshot:
        return 0

    viewer = LatticeViewer(controller, cfg, off_screen=args.no_show)
    viewer.show(screenshot=args.screenshot)
    return 0


if __name__ == "__main__":
    sys.exit(main())
