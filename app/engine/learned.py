"""Feed-forward regressors trained on synthetic samples (scikit-learn)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

import numpy as np
from sklearn.compose import TransformedTargetRegressor
from sklearn.metrics import mean_absolute_error, mean_squared_error
from sklearn.neural_network import MLPRegressor
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from app.engine.synthetic import SyntheticDataset

YIELD_HIDDEN_LAYERS = (64, 32, 16)
CLIMATE_HIDDEN_LAYERS = (32, 16)
LEARNING_RATE = 0.001
MAX_EPOCHS = 200


@dataclass(frozen=True, slots=True)
class TrainedModels:
	yield_model: TransformedTargetRegressor
	climate_model: TransformedTargetRegressor
	trained_at: datetime
	training_samples: int

	@property
	def training_loss(self) -> float:
		"""Final training loss of the yield network (in scaled target units)."""
		mlp = self.yield_model.regressor_.named_steps["mlp"]
		return float(mlp.loss_)


def _regressor(hidden_layers: tuple[int, ...], batch_size: int, random_state: int) -> TransformedTargetRegressor:
	network = Pipeline(
		[
			("scale", StandardScaler()),
			(
				"mlp",
				MLPRegressor(
					hidden_layer_sizes=hidden_layers,
					activation="relu",
					solver="adam",
					learning_rate_init=LEARNING_RATE,
					batch_size=batch_size,
					max_iter=MAX_EPOCHS,
					early_stopping=True,
					validation_fraction=0.2,
					random_state=random_state,
				),
			),
		]
	)
	return TransformedTargetRegressor(regressor=network, transformer=StandardScaler())


def train_models(dataset: SyntheticDataset, rng: np.random.Generator) -> TrainedModels:
	yield_model = _regressor(YIELD_HIDDEN_LAYERS, 32, int(rng.integers(0, 2**31 - 1)))
	yield_model.fit(dataset.yield_inputs, dataset.yield_outputs)

	climate_model = _regressor(CLIMATE_HIDDEN_LAYERS, 16, int(rng.integers(0, 2**31 - 1)))
	climate_model.fit(dataset.climate_inputs, dataset.climate_outputs)

	return TrainedModels(
		yield_model=yield_model,
		climate_model=climate_model,
		trained_at=datetime.now(UTC),
		training_samples=len(dataset),
	)


def predict_yield(models: TrainedModels, features: list[float]) -> float:
	result = models.yield_model.predict(np.asarray([features], dtype=float))
	return float(np.ravel(result)[0])


def predict_climate(models: TrainedModels, features: list[float]) -> tuple[float, float]:
	"""Return (rainfall, temperature) for the next period."""
	result = np.ravel(models.climate_model.predict(np.asarray([features], dtype=float)))
	return float(result[0]), float(result[1])


def evaluate_yield(models: TrainedModels, dataset: SyntheticDataset, size: int) -> tuple[float, float]:
	"""Mean squared error and mean absolute error over the first ``size`` samples."""
	inputs = dataset.yield_inputs[:size]
	expected = dataset.yield_outputs[:size]
	predicted = np.ravel(models.yield_model.predict(inputs))
	return float(mean_squared_error(expected, predicted)), float(mean_absolute_error(expected, predicted))
