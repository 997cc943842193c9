import pandas as pd
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Any, Union


def _record(obj: Any) -> Dict[str, Any]:
    return obj.to_dict() if hasattr(obj, 'to_dict') else dict(obj)


def _format_itemset(val: Any) -> str:
    """Convert an item collection to 'a, b, c'."""
    if isinstance(val, str):
        return val
    if isinstance(val, (list, tuple, set, frozenset)):
        items = sorted(val) if isinstance(val, (set, frozenset)) else val
        return ', '.join(str(item) for item in items)
    return str(val)


def format_rule_for_excel(rule: Any) -> Dict[str, Any]:
    """
    Format a rule for Excel output with human-readable antecedent/consequent.

    Item lists become comma separated strings: "bread, milk".
    """
    formatted = _record(rule)

    for key in ['antecedent', 'consequent', 'antecedents', 'consequents']:
        if key not in formatted:
            continue
        formatted[key] = _format_itemset(formatted[key])

    return formatted


def format_itemset_for_excel(itemset: Any) -> Dict[str, Any]:
    formatted = _record(itemset)
    formatted['length'] = len(formatted.get('itemset', ()))
    formatted['itemset'] = _format_itemset(formatted.get('itemset', ()))
    return formatted


def save_analysis_results(
    result,
    output_path: Union[str, Path],
    metadata: Dict[str, Any] = None
):
    """
    Save an analysis result to Excel with multiple sheets.

    Sheets:
        - Frequent Itemsets: itemset, support, frequency, length
        - Association Rules: antecedent, consequent and metrics
        - Summary: status, summary text, statistics and metadata
        - Parameters: algorithm and thresholds

    Args:
        result: AnalysisResult from run_analysis
        output_path: Output file path (will add .xlsx if needed)
        metadata: Additional metadata (dataset name, etc.)
    """
    output_path = Path(output_path)
    if output_path.suffix != '.xlsx':
        output_path = output_path.with_suffix('.xlsx')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        # Sheet 1: Frequent Itemsets
        itemset_columns = ['itemset', 'support', 'frequency', 'length']
        itemsets_df = pd.DataFrame(
            [format_itemset_for_excel(i) for i in result.itemsets],
            columns=itemset_columns
        )
        itemsets_df.to_excel(writer, sheet_name='Frequent Itemsets', index=False)

        # Sheet 2: Association Rules
        rule_columns = ['antecedent', 'consequent', 'support', 'confidence', 'lift', 'leverage', 'conviction']
        rules_df = pd.DataFrame(
            [format_rule_for_excel(r) for r in result.rules],
            columns=rule_columns
        )
        rules_df.to_excel(writer, sheet_name='Association Rules', index=False)

        # Sheet 3: Summary
        summary_data = {
            'Metric': ['status', 'summary', 'error_message', 'created_at', 'completed_at'],
            'Value': [
                result.status,
                result.summary,
                result.error_message,
                result.created_at.isoformat() if result.created_at else None,
                result.completed_at.isoformat() if result.completed_at else None
            ]
        }
        summary_data['Metric'].extend(list(result.stats.keys()))
        summary_data['Value'].extend(list(result.stats.values()))
        if metadata:
            summary_data['Metric'].extend(list(metadata.keys()))
            summary_data['Value'].extend(list(metadata.values()))
        summary_df = pd.DataFrame({
            'Metric': summary_data['Metric'],
            'Value': [str(v) if v is not None else '' for v in summary_data['Value']]
        })
        summary_df.to_excel(writer, sheet_name='Summary', index=False)

        # Sheet 4: Parameters
        params_df = pd.DataFrame({
            'Parameter': list(result.parameters.keys()),
            'Value': [str(v) for v in result.parameters.values()]
        })
        params_df.to_excel(writer, sheet_name='Parameters', index=False)

    print(f"Results saved to: {output_path}")
    return output_path


def save_experiment_results(
    output_path: Union[str, Path],
    sheets: Dict[str, Union[pd.DataFrame, List[Dict], Dict[str, Any]]]
):
    """
    Generic function to save results with custom sheets.

    Args:
        output_path: Output file path
        sheets: Dictionary mapping sheet names to data.
                Data can be:
                - pd.DataFrame: Written directly
                - List[Dict]: Converted to DataFrame
                - Dict[str, Any]: Converted to key-value DataFrame
    """
    output_path = Path(output_path)
    if output_path.suffix != '.xlsx':
        output_path = output_path.with_suffix('.xlsx')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        for sheet_name, data in sheets.items():
            if isinstance(data, pd.DataFrame):
                df = data
            elif isinstance(data, list) and data and isinstance(data[0], dict):
                df = pd.DataFrame(data)
            elif isinstance(data, dict):
                df = pd.DataFrame({
                    'Key': list(data.keys()),
                    'Value': [str(v) for v in data.values()]
                })
            else:
                continue

            # Truncate sheet name if too long (Excel limit is 31 chars)
            safe_name = sheet_name[:31]
            df.to_excel(writer, sheet_name=safe_name, index=False)

    print(f"Results saved to: {output_path}")
    return output_path


def save_rules_text(
    rules: List[Any],
    output_path: Union[str, Path],
    title: str = "ASSOCIATION RULES",
    metadata: Dict[str, Any] = None
) -> Path:
    """
    Save rules in human-readable text format.

    Args:
        rules: List of AssociationRule (or rule dictionaries)
        output_path: Output file path (will add .txt if needed)
        title: Title for the output file header
        metadata: Optional metadata to include in header
    """
    output_path = Path(output_path)
    if output_path.suffix != '.txt':
        output_path = output_path.with_suffix('.txt')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    def format_metric(value, decimals=4):
        if isinstance(value, (int, float)):
            return f"{value:.{decimals}f}"
        return str(value) if value is not None else "N/A"

    with open(output_path, 'w') as f:
        f.write("=" * 80 + "\n")
        f.write(f"{title}\n")
        f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        if metadata:
            for key, val in metadata.items():
                f.write(f"{key}: {val}\n")
        f.write("=" * 80 + "\n\n")

        if not rules:
            f.write("No rules found.\n")
            print(f"Rules saved to: {output_path}")
            return output_path

        for i, rule in enumerate(rules, 1):
            _write_rule(f, format_rule_for_excel(rule), i, format_metric)

        f.write("=" * 80 + "\n")
        f.write(f"Total rules: {len(rules)}\n")
        f.write("=" * 80 + "\n")

    print(f"Rules saved to: {output_path}")
    return output_path


def _write_rule(f, rule: Dict[str, Any], rule_num: int, format_metric):
    antecedent = rule.get('antecedent', rule.get('antecedents', 'N/A'))
    consequent = rule.get('consequent', rule.get('consequents', 'N/A'))

    f.write(f"Rule #{rule_num}:\n")
    f.write(f"  IF {antecedent}\n")
    f.write(f"  THEN {consequent}\n\n")
    f.write(f"  Metrics:\n")

    metrics = [
        ('confidence', 'Confidence'),
        ('support', 'Support'),
        ('lift', 'Lift'),
        ('leverage', 'Leverage'),
        ('conviction', 'Conviction'),
    ]

    for key, label in metrics:
        if key in rule:
            f.write(f"    {label:18s} {format_metric(rule[key])}\n")

    f.write("\n")
