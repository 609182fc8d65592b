#!/usr/bin/env python3
"""
遺傳演算法框架 - 統一入口點

通過 JSON 配置文件設定基因組、運算子機率、選擇與替換策略，
執行演化並輸出每個世代的 min;avg;max 統計以及最終最優個體。

使用方式:
    python main_evolution.py --config configs/sample_config.json
    python main_evolution.py --config configs/sphere_config.json --seed 7 --verbose
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

from pyga.config import create_evolution_engine, load_config
from pyga.evolution.handlers import EventHandler, LoggingHandler, ProgressHandler
from pyga.exceptions import ConfigurationError


def print_experiment_info(config: Dict[str, Any]):
    """打印實驗信息"""
    experiment = config.get('experiment', {})
    evolution = config['evolution']
    print("\n" + "=" * 60)
    print(f"🧬 實驗名稱: {experiment.get('name', 'unnamed')}")
    if experiment.get('description'):
        print(f"📝 實驗描述: {experiment['description']}")
    print(f"🔢 族群大小: {evolution.get('population_size', 500)}")
    print(f"🔄 演化世代: {evolution.get('generations', 100)}")
    print(f"🧪 運算子機率: {config['operators']}")
    print(f"🎯 適應度函數: {config['fitness'].get('function')}")
    print("=" * 60 + "\n")


def main(argv: List[str] = None):
    """主函數 - 演化計算入口點"""
    parser = argparse.ArgumentParser(
        description='遺傳演算法框架',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用範例:
  python main_evolution.py --config configs/sample_config.json
  python main_evolution.py --config configs/sphere_config.json --test
        """
    )
    parser.add_argument('--config', required=True, help='配置文件路徑')
    parser.add_argument('--test', action='store_true', help='測試模式 (覆蓋為小規模參數)')
    parser.add_argument('--seed', type=int, default=None, help='隨機種子 (覆蓋配置)')
    parser.add_argument('--no-progress', action='store_true', help='不顯示進度條')
    parser.add_argument('--summary', default=None, help='將結果摘要寫入 JSON 文件')
    parser.add_argument('--verbose', '-v', action='store_true', help='詳細輸出模式')

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        logging_config = config.get('logging', {})

        level = logging.DEBUG if args.verbose else getattr(logging, str(logging_config.get('level', 'INFO')).upper(),
                                                           logging.INFO)
        logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

        if args.test:
            print("🧪 測試模式啟用")
            config['evolution']['population_size'] = min(config['evolution'].get('population_size', 500), 20)
            config['evolution']['generations'] = min(config['evolution'].get('generations', 100), 5)

        if args.seed is not None:
            config['evolution']['seed'] = args.seed

        print_experiment_info(config)

        handlers: List[EventHandler] = [LoggingHandler(level=logging.DEBUG)]
        if logging_config.get('progress', False) and not args.no_progress:
            handlers.append(ProgressHandler())

        engine = create_evolution_engine(config, handlers=handlers)
        result = engine.evolve()

        for stats in result.statistics:
            print(f"{stats.min:3.2f};{stats.avg:3.2f};{stats.max:3.2f}")

        best = result.best_individual
        print(best.as_string() if hasattr(best, 'as_string') else repr(best))

        if args.verbose:
            print("\n🧬 最終族群:")
            print(engine.population_as_string())

        print(f"\n✅ 演化計算完成! 世代數: {result.generations_completed}, "
              f"⏱️ {result.execution_time:.2f} 秒")

        if args.summary:
            summary_file = Path(args.summary)
            summary_file.parent.mkdir(parents=True, exist_ok=True)
            with open(summary_file, 'w', encoding='utf-8') as f:
                json.dump({'config': config, **result.to_dict()}, f, indent=2, ensure_ascii=False)
            print(f"📄 實驗摘要保存於: {summary_file}")

        return result

    except KeyboardInterrupt:
        print("\n⚠️ 用戶中斷實驗")
        sys.exit(1)
    except (ConfigurationError, FileNotFoundError) as e:
        print(f"\n❌ 配置錯誤: {e}")
        sys.exit(2)
    except Exception as e:
        print(f"\n❌ 實驗執行失敗: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
