"""
扫描控制 - 串口按钮触发的扫描任务编排

模块结构：
- config/      运行期配置加载
- models/      数据模型定义（Settings/Plan/Job）
- controller/  串口帧监听与帧解析
- pipeline/    规划器与执行器
- scanner/     外部扫描/图像处理工具适配层
- runtime/     日志汇聚、退出协调、主循环
"""

__version__ = "0.1.0"
