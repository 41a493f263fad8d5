from orgchart.view.chart_widget import OrgChartWidget

__all__ = ["OrgChartWidget"]
