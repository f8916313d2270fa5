# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""Graphical viewer for the simulator."""
import math
from typing import Callable, Optional

from PySide6.QtWidgets import QApplication, QWidget, QVBoxLayout, QLabel, QGraphicsView, QGraphicsScene, QPushButton, QHBoxLayout, QSizePolicy
from PySide6.QtCore import QTimer, Qt, QPointF, QRectF
from PySide6.QtGui import QColor, QPen, QBrush, QPainterPath

from antix.config import SimulationParams
from antix.entityManager import EntityManager
from antix.geometry_utils.torus import rtod
from antix.logging_utils import get_logger

logger = get_logger("gui")


class GuiFactory():

    """Gui factory."""
    @staticmethod
    def create_gui(params: SimulationParams, manager: EntityManager, rebuild: Optional[Callable[[], EntityManager]] = None):
        """Create gui."""
        app = QApplication.instance() or QApplication([])
        return app, GUI_2D(params, manager, rebuild=rebuild)


def _qcolor(rgb) -> QColor:
    """QColor from an (r, g, b) triple in [0, 1]."""
    return QColor.fromRgbF(float(rgb[0]), float(rgb[1]), float(rgb[2]))


class GUI_2D(QWidget):
    """Top-down view of the torus with Start/Stop/Step/Reset controls."""
    def __init__(self, params: SimulationParams, manager: EntityManager, rebuild: Optional[Callable[[], EntityManager]] = None):
        """Initialize the instance."""
        super().__init__()
        self.params = params
        self.manager = manager
        self.rebuild = rebuild
        self.show_data = params.show_data
        self.setWindowTitle("Antix")
        self.resize(params.winsize, params.winsize + 60)

        self._main_layout = QVBoxLayout()
        self.data_label = QLabel("Paused")
        self._main_layout.addWidget(self.data_label)
        self.button_layout = QHBoxLayout()
        self.start_button = QPushButton("Start")
        self.stop_button = QPushButton("Stop")
        self.step_button = QPushButton("Step")
        self.reset_button = QPushButton("Reset")
        self.data_button = QPushButton("Sensors")
        self.data_button.setCheckable(True)
        self.data_button.setChecked(self.show_data)
        for button in (self.start_button, self.stop_button, self.step_button, self.reset_button, self.data_button):
            self.button_layout.addWidget(button)
        self._main_layout.addLayout(self.button_layout)
        self.start_button.clicked.connect(self.start_simulation)
        self.stop_button.clicked.connect(self.stop_simulation)
        self.step_button.clicked.connect(self.step_simulation)
        self.reset_button.clicked.connect(self.reset_simulation)
        self.data_button.toggled.connect(self.toggle_show_data)

        self.view = QGraphicsView()
        self.view.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.view.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.view.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.scene = QGraphicsScene()
        self.scene.setBackgroundBrush(QColor(240, 240, 240))
        self.view.setScene(self.scene)
        self._main_layout.addWidget(self.view, 1)
        self.setLayout(self._main_layout)

        self.scale = 1.0
        self.offset = 10.0
        self.running = False
        self.tick_timer = QTimer(self)
        self.tick_timer.timeout.connect(self.advance)
        self.tick_timer.setInterval(max(0, int(params.sleep_msec)))
        self.redraw_timer = QTimer(self)
        self.redraw_timer.timeout.connect(self.update_scene)
        self.redraw_timer.start(max(1, int(params.gui_interval)))
        logger.info("GUI created successfully")

    def resizeEvent(self, event):
        """Handle Qt resize events."""
        super().resizeEvent(event)
        self.update_scene()

    def start_simulation(self):
        """Start the simulation."""
        self.running = True
        self.tick_timer.start()

    def stop_simulation(self):
        """Stop the simulation."""
        self.running = False
        self.tick_timer.stop()
        self.update_scene()

    def step_simulation(self):
        """Advance a single tick while paused."""
        if not self.running:
            self.advance()
            self.update_scene()

    def reset_simulation(self):
        """Rebuild the world from the startup parameters."""
        self.stop_simulation()
        if self.rebuild is not None:
            self.manager = self.rebuild()
            logger.info("Simulation reset")
        self.update_scene()

    def toggle_show_data(self, checked: bool):
        """Show or hide the sensor wedges."""
        self.show_data = bool(checked)
        self.update_scene()

    def advance(self):
        """Run one tick; stop the timer once the bound is reached."""
        if not self.manager.step():
            self.stop_simulation()
            self.data_label.setText(f"Finished at update {self.manager.updates}")

    def _to_scene(self, x: float, y: float) -> QPointF:
        """World coordinates to scene pixels."""
        return QPointF(x * self.scale + self.offset, y * self.scale + self.offset)

    def update_scene(self):
        """Redraw homes, pucks and robots from a world snapshot."""
        world = self.manager.world
        view_side = max(1, min(self.view.viewport().width(), self.view.viewport().height()))
        self.scale = max(1.0, view_side - 2 * self.offset) / world.params.worldsize
        side = world.params.worldsize * self.scale
        self.scene.clear()
        self.scene.setSceneRect(0, 0, side + 2 * self.offset, side + 2 * self.offset)
        self.scene.addRect(QRectF(self.offset, self.offset, side, side), QPen(Qt.black, 1), QBrush(Qt.white))
        snap = world.snapshot()

        for (hx, hy), r, rgb in zip(snap["home_positions"], snap["home_radii"], snap["home_colors"]):
            color = _qcolor(rgb)
            color.setAlphaF(0.35)
            centre = self._to_scene(hx, hy)
            self.scene.addEllipse(centre.x() - r * self.scale, centre.y() - r * self.scale,
                                  2 * r * self.scale, 2 * r * self.scale, QPen(Qt.NoPen), QBrush(color))

        puck_pen = QPen(Qt.black, 0.5)
        puck_pen.setCosmetic(True)
        for (px, py), held in zip(snap["puck_positions"], snap["puck_held"]):
            if held:
                continue
            p = self._to_scene(px, py)
            self.scene.addRect(QRectF(p.x() - 1.5, p.y() - 1.5, 3, 3), puck_pen, QBrush(Qt.darkGray))

        radius = max(2.0, world.params.radius * self.scale)
        sensor_range = world.params.range * self.scale
        half_fov_deg = rtod(world.params.fov) / 2.0
        for (x, y, a), holding, home in zip(snap["robot_poses"], snap["robot_holding"], snap["robot_homes"]):
            color = _qcolor(snap["home_colors"][home])
            centre = self._to_scene(x, y)
            if self.show_data:
                # Qt angles run counter-clockwise with y pointing up; the scene y axis points down
                wedge = QPainterPath(centre)
                wedge.arcTo(QRectF(centre.x() - sensor_range, centre.y() - sensor_range, 2 * sensor_range, 2 * sensor_range),
                            -rtod(a) - half_fov_deg, 2 * half_fov_deg)
                wedge.closeSubpath()
                fov_color = QColor(color)
                fov_color.setAlphaF(0.15)
                self.scene.addPath(wedge, QPen(Qt.NoPen), QBrush(fov_color))
            brush = QBrush(color) if holding else QBrush(Qt.NoBrush)
            self.scene.addEllipse(centre.x() - radius, centre.y() - radius, 2 * radius, 2 * radius, QPen(color, 1), brush)
            nose = QPointF(centre.x() + radius * math.cos(a), centre.y() + radius * math.sin(a))
            self.scene.addLine(centre.x(), centre.y(), nose.x(), nose.y(), QPen(Qt.black, 1))

        if self.running or self.manager.updates:
            self.data_label.setText(f"Update: {self.manager.updates}  Delivered: {world.delivered()}")
