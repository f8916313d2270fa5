# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

import sys, getopt, logging
from pathlib import Path
from antix.config import Config
from antix.environment import EnvironmentFactory
from antix.plugin_registry import available_controllers, available_detection_models, available_motion_models, load_plugins_from_config
from antix.logging_utils import configure_logging

# plugin modules named in a config are resolved against the launch directory
ROOT_DIR = Path.cwd()
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

USAGE = """Usage: antix [options]
  -a <int>     number of pucks
  -h <int>     number of homes
  -p <int>     number of robots
  -s <float>   world size
  -f <float>   sensor field of view (degrees)
  -r <float>   sensor range
  -g <int>     GUI redraw interval (ms)
  -u <int>     stop after this many updates (0 = run forever)
  -z <int>     sleep between updates (ms)
  -w <int>     window size (pixels)
  -d           show sensor data
  -c <file>    JSON configuration file
  --gui        open the viewer
  --headless   never open the viewer (it opens by default when -u is 0
               or -d, -g or -w is given)
  -?, --help   print this message"""

FLAG_KEYS = {
    "-a": "puck_count",
    "-h": "home_count",
    "-p": "home_population",
    "-s": "worldsize",
    "-f": "fov",
    "-r": "range",
    "-g": "gui_interval",
    "-u": "updates_max",
    "-z": "sleep_msec",
    "-w": "winsize",
}
PRESENTATION_KEYS = ("show_data", "winsize", "gui_interval")


def print_usage(errcode=None):
    """Print usage and the strategies a config can name."""
    print(USAGE)
    print(f"\nControllers:       {', '.join(sorted(available_controllers()))}")
    print(f"Detection models:  {', '.join(sorted(available_detection_models()))}")
    print(f"Motion models:     {', '.join(sorted(available_motion_models()))}")
    sys.exit(errcode)


def parse_args(argv):
    """Return (config file, parameter overrides, render flag or None) from the command line."""
    configfile = ""
    overrides = {}
    render = None
    try:
        opts, args = getopt.getopt(argv, "?da:h:p:s:f:r:g:u:z:w:c:", ["help", "config=", "gui", "headless"])
    except getopt.GetoptError as e:
        logging.fatal(f"Error in parsing command line arguments: {e}")
        print_usage(1)
    for opt, arg in opts:
        if opt in ("-?", "--help"):
            print_usage()
        elif opt in ("-c", "--config"):
            configfile = arg
        elif opt == "-d":
            overrides["show_data"] = True
        elif opt == "--gui":
            render = True
        elif opt == "--headless":
            render = False
        else:
            overrides[FLAG_KEYS[opt]] = arg
    return configfile, overrides, render


def main(argv):
    """Parse arguments and start the simulator."""
    configfile, overrides, render = parse_args(argv)
    config_path_resolved = None
    if configfile:
        config_path_resolved = Path(configfile).expanduser().resolve()
    try:
        my_config = Config(config_path=configfile) if configfile else Config(new_data={})
        configure_logging(
            my_config.logging,
            config_path=config_path_resolved,
            project_root=ROOT_DIR,
        )
        # Load any external plugins declared in the config (optional).
        load_plugins_from_config(my_config)
        params = my_config.params(overrides)
        if render is None:
            # no bound, or a presentation flag, means someone is watching
            render = bool(my_config.gui) or params.updates_max == 0 or any(key in overrides for key in PRESENTATION_KEYS)
        my_env = EnvironmentFactory.create_environment(params, render=render)
        my_env.start()
    except Exception as e:
        logging.fatal(f"Failed to create environment: {e}")
        sys.exit(1)


def run():
    """Console entry point."""
    main(sys.argv[1:])


if __name__ == "__main__":
    run()
