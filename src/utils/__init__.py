from .excel_io import (
    save_analysis_results,
    save_experiment_results,
    save_rules_text,
    format_rule_for_excel
)

__all__ = [
    'save_analysis_results',
    'save_experiment_results',
    'save_rules_text',
    'format_rule_for_excel'
]
