import pytest

import antix.main as cli


class TestParseArgs:
    def test_flags_map_to_parameters(self):
        configfile, overrides, render = cli.parse_args(
            ["-a", "7", "-h", "2", "-p", "11", "-s", "2.0", "-f", "120", "-r", "0.2",
             "-g", "50", "-u", "100", "-z", "0", "-w", "500", "-d", "-c", "run.json"])
        assert configfile == "run.json"
        assert render is None
        assert overrides == {
            "puck_count": "7",
            "home_count": "2",
            "home_population": "11",
            "worldsize": "2.0",
            "fov": "120",
            "range": "0.2",
            "gui_interval": "50",
            "updates_max": "100",
            "sleep_msec": "0",
            "winsize": "500",
            "show_data": True,
        }

    def test_render_switches(self):
        assert cli.parse_args(["--gui"])[2] is True
        assert cli.parse_args(["--headless"])[2] is False

    def test_help(self, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.parse_args(["-?"])
        assert exc.value.code is None
        out = capsys.readouterr().out
        assert "Usage" in out
        assert "forager" in out
        assert "range_bearing" in out

    def test_unknown_flag(self):
        with pytest.raises(SystemExit) as exc:
            cli.parse_args(["-x"])
        assert exc.value.code == 1


class TestMain:
    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch):
        monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)

    def test_headless_run(self, monkeypatch):
        started = []
        original = cli.EnvironmentFactory.create_environment

        def create(params, render=False):
            env = original(params, render=render)
            started.append((params, render))
            return env

        monkeypatch.setattr(cli.EnvironmentFactory, "create_environment", staticmethod(create))
        cli.main(["-u", "3", "-z", "0", "-p", "4", "-a", "5", "--headless"])
        params, render = started[0]
        assert render is False
        assert params.updates_max == 3
        assert params.home_population == 4

    @pytest.mark.parametrize("argv, expected", [
        ([], True),
        (["-u", "0"], True),
        (["-u", "5"], False),
        (["-u", "5", "-d"], True),
        (["-u", "5", "-w", "400"], True),
        (["-u", "5", "-g", "20"], True),
        (["-u", "5", "--gui"], True),
        (["--headless"], False),
    ])
    def test_viewer_default(self, monkeypatch, argv, expected):
        chosen = []

        class Idle:
            def start(self):
                pass

        def create(params, render=False):
            chosen.append(render)
            return Idle()

        monkeypatch.setattr(cli.EnvironmentFactory, "create_environment", staticmethod(create))
        cli.main(argv)
        assert chosen == [expected]

    def test_bad_value_exits(self):
        with pytest.raises(SystemExit) as exc:
            cli.main(["-a", "lots", "-u", "3"])
        assert exc.value.code == 1

    def test_unbounded_headless_run_exits(self):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--headless"])
        assert exc.value.code == 1

    def test_config_file(self, tmp_path):
        path = tmp_path / "run.json"
        path.write_text('{"environment": {"updates_max": 2, "sleep_msec": 0, "agents": {"number": 3}}}')
        cli.main(["-c", str(path), "--headless"])
