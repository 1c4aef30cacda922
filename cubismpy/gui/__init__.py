"""
GUI 模块

基于 PyQt6 的模型预览控件。
"""
