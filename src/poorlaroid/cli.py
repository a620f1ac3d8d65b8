import argparse
import sys
import threading
from pathlib import Path

from poorlaroid.capture import CameraSource, ImageFileSource, flip_for_device
from poorlaroid.config import AppConfig, load_config
from poorlaroid.converter import grid_to_ansi
from poorlaroid.engine import CellGrid, UnknownShaderName
from poorlaroid.export import load_font, rasterize, save_capture
from poorlaroid.logging_setup import configure_logging
from poorlaroid.render import RenderSession
from poorlaroid.shaders import default_shaders
from poorlaroid.terminal import grid_size_for_terminal

HOME = "\033[H"
CLEAR = "\033[2J"


def _grid_size(args: argparse.Namespace, cfg: AppConfig) -> tuple[int, int]:
    term_width, term_height = grid_size_for_terminal()
    width = args.width or cfg.grid.width or term_width
    height = args.height or cfg.grid.height or term_height
    return width, height


def _session(args: argparse.Namespace, cfg: AppConfig, flip: bool) -> RenderSession:
    width, height = _grid_size(args, cfg)
    return RenderSession(
        CellGrid(width, height),
        default_shaders(cfg.render.keep_cancelled_samples),
        shader=args.shader or cfg.render.shader,
        flip=flip,
    )


def _export(session: RenderSession, folder: str | None, cfg: AppConfig) -> Path:
    cell_width, cell_height = cfg.capture.cell_width, cfg.capture.cell_height
    font = load_font(cfg.capture.font_path, cell_height)
    session.suspend()
    try:
        image = rasterize(session.grid, cell_width, cell_height, font)
        return save_capture(image, folder or cfg.capture.folder)
    finally:
        session.resume()


def cmd_shaders(_args: argparse.Namespace, _cfg: AppConfig) -> int:
    for shader in default_shaders():
        print(shader.name)
    return 0


def cmd_render(args: argparse.Namespace, cfg: AppConfig) -> int:
    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        return 1

    session = _session(args, cfg, args.flip or cfg.render.flip)
    completed = []
    source = ImageFileSource(image_path, lambda frame: completed.append(session.submit(frame)))
    for _ in range(max(1, args.passes)):
        source.start()
    if not all(completed):
        print(f"{image_path} is too small for a {session.grid.width}x{session.grid.height} grid", file=sys.stderr)
        return 1

    print(grid_to_ansi(session.grid, colour=args.colour))
    if args.export is not None:
        path = _export(session, args.export or None, cfg)
        print(f"Saved {path}", file=sys.stderr)
    return 0


def cmd_live(args: argparse.Namespace, cfg: AppConfig) -> int:
    flip = args.flip or flip_for_device(args.device_name or "", cfg.render.flip)
    session = _session(args, cfg, flip)
    done = threading.Event()
    frames = 0

    def on_frame(frame) -> None:
        nonlocal frames
        if not session.submit(frame):
            return
        sys.stdout.write(HOME + grid_to_ansi(session.grid, colour=args.colour) + "\n")
        sys.stdout.flush()
        frames += 1
        if args.frames and frames >= args.frames:
            done.set()

    camera = CameraSource(args.camera, on_frame)
    try:
        camera.start()
    except (ImportError, RuntimeError) as exc:
        print(f"Camera unavailable: {exc}", file=sys.stderr)
        return 1

    sys.stdout.write(CLEAR)
    try:
        while not done.wait(0.1):
            if not camera.running:
                break
    except KeyboardInterrupt:
        pass
    finally:
        camera.stop()

    if args.export is not None:
        path = _export(session, args.export or None, cfg)
        print(f"Saved {path}", file=sys.stderr)
    return 0


def _add_render_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-W", "--width", type=int, default=None, help="Grid width in cells (default: config or terminal)")
    parser.add_argument("-H", "--height", type=int, default=None, help="Grid height in cells (default: config or terminal)")
    parser.add_argument("-s", "--shader", default=None, help="Shader name, case-insensitive (see 'shaders')")
    parser.add_argument("-f", "--flip", action="store_true", default=False, help="Mirror the output horizontally")
    parser.add_argument(
        "--no-colour", dest="colour", action="store_false", default=True, help="Plain text output without ANSI colour"
    )
    parser.add_argument(
        "-x",
        "--export",
        nargs="?",
        const="",
        default=None,
        metavar="DIR",
        help="Save the rendered grid as a bitmap (default folder: ~/Pictures/Poorlaroid)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="poorlaroid", description="Render camera frames as coloured character art")
    parser.add_argument("--config", type=Path, default=None, help="Settings file (default: per-user config.json)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_render = sub.add_parser("render", help="Render a still image")
    p_render.add_argument("image", help="Path to input image")
    p_render.add_argument(
        "-p", "--passes", type=int, default=1, help="Render passes, lets calibrated shaders settle (default: 1)"
    )
    _add_render_options(p_render)
    p_render.set_defaults(func=cmd_render)

    p_live = sub.add_parser("live", help="Render a camera feed (needs the 'camera' extra)")
    p_live.add_argument("-c", "--camera", type=int, default=0, help="Camera index (default: 0)")
    p_live.add_argument("--device-name", default=None, help="Device name; 'front' turns flip on, 'rear' off")
    p_live.add_argument("-n", "--frames", type=int, default=0, help="Stop after N rendered frames (default: run forever)")
    _add_render_options(p_live)
    p_live.set_defaults(func=cmd_live)

    p_shaders = sub.add_parser("shaders", help="List shader names")
    p_shaders.set_defaults(func=cmd_shaders)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = load_config(args.config)
    configure_logging(cfg.logging.level, cfg.logging.keep_files, cfg.logging.console)
    try:
        return args.func(args, cfg)
    except UnknownShaderName as exc:
        print(f"Shader unavailable: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
