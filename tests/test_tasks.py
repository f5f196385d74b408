"""End-to-end runs of the train and generate tasks on small configs."""

import pytest
from omegaconf import OmegaConf
from datasets.xor import XorDataset
from main import main
from tasks.generate import GenerateTask
from tasks.xor import XorTask, build_dataset


def _config(**overrides):
    cfg = OmegaConf.create({
        'name': 'train',
        'dataset': {
            'path': None,
            'kind': 'exact',
            'num_dimensions': 2,
            'cardinality': 4,
            'variance': 0.01,
            'seed': 0,
            'encoding': 'phase',
            'output_path': None,
            'precision': None,
        },
        'model': {'seed': 42, 'update_rule': 'decomposition', 'learning_rate': None},
        'training': {'epochs': 100, 'batch_size': None, 'shuffle': True, 'log_every': 25},
    })
    return OmegaConf.merge(cfg, OmegaConf.create(overrides))


class TestXorTask:

    def test_train_exact(self):
        metrics = XorTask(_config()).run()
        assert metrics['Acc'] > 0.9

    def test_adaptive_rule(self):
        cfg = _config(model={'update_rule': 'adaptive'}, training={'epochs': 5})
        task = XorTask(cfg)
        metrics = task.run()
        assert task.model.action.is_unit()
        assert 0.0 <= metrics['Acc'] <= 1.0

    def test_mini_batches(self):
        cfg = _config(dataset={'kind': 'fuzzy'}, training={'epochs': 3, 'batch_size': 4})
        metrics = XorTask(cfg).run()
        assert set(metrics) == {'Acc', 'GeoErr'}

    def test_train_from_csv(self, tmp_path):
        path = tmp_path / "xor.csv"
        XorDataset.exact(2).to_csv(str(path))
        cfg = _config(dataset={'path': str(path)}, training={'epochs': 2})
        assert XorTask(cfg).run()['Acc'] >= 0.0

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            XorTask(_config(training={'batch_size': 0}))

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            build_dataset(_config(dataset={'kind': 'spiral'}).dataset)


class TestGenerateTask:

    def test_writes_csv(self, tmp_path):
        path = tmp_path / "out" / "fuzzy.csv"
        cfg = _config(name='generate', dataset={'kind': 'fuzzy', 'output_path': str(path)})
        dataset = GenerateTask(cfg).run()
        assert len(dataset) == 16
        assert len(path.read_text().splitlines()) == 16

    def test_requires_output_path(self):
        with pytest.raises(ValueError):
            GenerateTask(_config(name='generate'))


class TestMain:

    def test_unknown_task(self):
        with pytest.raises(ValueError):
            main(_config(name='bogus'))

    def test_dispatch_generate(self, tmp_path):
        path = tmp_path / "xor.csv"
        main(_config(name='generate', dataset={'output_path': str(path)}))
        assert path.exists()
