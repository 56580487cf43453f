"""
运行时（退出协调/日志汇聚）单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_runtime.py -v
"""

import logging
import signal

from scan_control.config import LoggingConfig
from scan_control.runtime import LogSink, ShutdownCoordinator


class TestShutdownCoordinator:
    """退出协调器测试"""

    def test_initially_running(self, shutdown):
        """测试初始状态"""
        assert shutdown.should_quit() is False

    def test_request_quit_idempotent(self, shutdown):
        """测试重复请求退出"""
        shutdown.request_quit("first")
        shutdown.request_quit("second")
        assert shutdown.should_quit() is True

    def test_request_quit_logs_reason(self, shutdown, caplog):
        """测试退出原因写入日志"""
        with caplog.at_level(logging.INFO, logger="scan_control"):
            shutdown.request_quit("operator pressed stop")
        assert "operator pressed stop" in caplog.text

    def test_signal_handler_sets_flag(self, shutdown, caplog):
        """测试信号转换为退出请求"""
        original = signal.getsignal(signal.SIGTERM)
        shutdown.install_signal_handlers(("SIGTERM",))
        try:
            handler = signal.getsignal(signal.SIGTERM)
            assert handler != original
            with caplog.at_level(logging.INFO, logger="scan_control"):
                handler(signal.SIGTERM, None)
        finally:
            shutdown.restore_signal_handlers()

        assert shutdown.should_quit() is True
        assert "caught SIGTERM, exiting gracefully" in caplog.text
        assert signal.getsignal(signal.SIGTERM) == original

    def test_unknown_signal_name_ignored(self, shutdown):
        """测试平台不支持的信号名"""
        shutdown.install_signal_handlers(("SIGNOPE",))
        shutdown.restore_signal_handlers()
        assert shutdown.should_quit() is False


class TestLogSink:
    """日志汇聚测试"""

    def test_writes_to_log_file(self, temp_dir):
        """测试队列记录写入日志文件"""
        log_file = temp_dir / "logs" / "scan-control.log"
        sink = LogSink(LoggingConfig(log_file=log_file))
        with sink:
            assert sink.running
            logging.getLogger("scan_control.test").info("controller starting")
            logging.getLogger("scan_control.test").debug("hidden at INFO")
        assert not sink.running

        content = log_file.read_text(encoding="utf-8")
        assert "controller starting" in content
        assert "hidden at INFO" not in content

    def test_appends_to_existing_file(self, temp_dir):
        """测试追加写入"""
        log_file = temp_dir / "scan-control.log"
        log_file.write_text("previous run\n", encoding="utf-8")
        with LogSink(LoggingConfig(log_file=log_file)):
            logging.getLogger("scan_control").info("second run")

        content = log_file.read_text(encoding="utf-8")
        assert content.startswith("previous run\n")
        assert "second run" in content

    def test_verbose_enables_debug(self, temp_dir):
        """测试 verbose 输出调试日志"""
        log_file = temp_dir / "scan-control.log"
        with LogSink(LoggingConfig(log_file=log_file), verbose=True):
            logging.getLogger("scan_control.controller").debug("controller listening")
        assert "controller listening" in log_file.read_text(encoding="utf-8")

    def test_stdout_when_not_logging_to_file(self, temp_dir, capsys):
        """测试不写文件时输出到标准输出"""
        with LogSink(LoggingConfig(log_to_file=False, log_file=temp_dir / "unused.log")):
            logging.getLogger("scan_control").info("to stdout")
        assert "to stdout" in capsys.readouterr().out
        assert not (temp_dir / "unused.log").exists()

    def test_stop_restores_logger(self, temp_dir):
        """测试停止后恢复 logger 状态"""
        logger = logging.getLogger("scan_control")
        propagate, level = logger.propagate, logger.level
        sink = LogSink(LoggingConfig(log_file=temp_dir / "x.log"))
        sink.start()
        sink.start()
        sink.stop()
        sink.stop()
        assert logger.propagate == propagate
        assert logger.level == level
        assert sink.queue_handler not in logger.handlers
